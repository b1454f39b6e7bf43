"""
Test command line handling and startup wiring
"""
import json
from unittest.mock import MagicMock, patch

import pytest

from artfs import main as app
from artfs.channels.schema import SchemaError
from artfs.core.config import ConfigValidator
from artfs.core.constants import EXIT_OK, EXIT_STARTUP_FAILURE
from artfs.liveedit.client import LiveEditError


@pytest.fixture
def config():
    return ConfigValidator().get_default_config()


@pytest.fixture
def config_file(tmp_path):
    def _write(data):
        path = tmp_path / 'config.json'
        path.write_text(json.dumps(data), encoding='utf-8')
        return str(path)
    return _write


class TestArguments:

    def test_defaults(self):
        args = app.parse_args([])
        assert args.config == 'config.json'
        assert args.emit_random is False
        assert args.subnet is None and args.universe is None and args.net is None

    def test_overrides(self, config):
        args = app.parse_args(['-e', '-s', '1', '-u', '2', '-n', '3',
                               '--device-host', '10.1.1.1', '--device-port', '8080',
                               '--log-level', 'debug'])
        app.apply_cli_overrides(config, args)

        assert config['artnet']['subnet'] == 1
        assert config['artnet']['universe'] == 2
        assert config['artnet']['net'] == 3
        assert config['artnet']['emit_random']['enabled'] is True
        assert config['device'] == {'host': '10.1.1.1', 'port': 8080, 'timeout': 2.0, 'max_workers': 4}
        assert config['app']['console_log_level'] == 'DEBUG'

    def test_no_overrides_keep_config(self, config):
        expected = ConfigValidator().get_default_config()
        assert app.apply_cli_overrides(config, app.parse_args([])) == expected


class TestBuildSchema:

    def test_builtin_table(self, config):
        assert len(app.build_schema(config)) == 13

    def test_config_table(self, config):
        config['channels'] = [{'index': 40, 'param': 'p', 'min': 0, 'center': 1, 'max': 2}]
        schema = app.build_schema(config)
        assert schema.lookup(40).parameter_id == 'p'
        assert schema.lookup(0) is None

    def test_empty_table_is_not_replaced(self, config):
        config['channels'] = []
        schema = app.build_schema(config)
        assert len(schema) == 0
        assert schema.lookup(0) is None

    def test_invalid_table(self, config):
        config['channels'] = [{'index': 0, 'param': 'p', 'min': 5, 'center': 1, 'max': 2}]
        with pytest.raises(SchemaError):
            app.build_schema(config)


class TestFetchLiveEdit:

    def test_disabled(self, config):
        assert app.fetch_liveedit(config) is None

    @patch('artfs.main.LiveEditClient')
    def test_enabled(self, client_cls, config):
        config['liveedit'].update(enabled=True, url='http://liveedit.local/api')
        client_cls.return_value.fetch_entries.return_value = [{'title': 'Intro'}]

        assert app.fetch_liveedit(config) == [{'title': 'Intro'}]
        client_cls.assert_called_once_with('http://liveedit.local/api', timeout=5.0)


@patch('artfs.main.setup_logging')
@patch('artfs.main.print', create=True)
class TestMain:

    def test_invalid_config_exits(self, _print, _logging, config_file):
        assert app.main(['-c', config_file({'device': {'port': 0}})]) == EXIT_STARTUP_FAILURE

    def test_config_directory_exits(self, _print, _logging, tmp_path):
        assert app.main(['-c', str(tmp_path)]) == EXIT_STARTUP_FAILURE

    @patch('artfs.main.LiveEditClient')
    def test_liveedit_failure_exits(self, client_cls, _print, _logging, config_file):
        client_cls.return_value.fetch_entries.side_effect = LiveEditError("down")
        path = config_file({'liveedit': {'enabled': True, 'url': 'http://liveedit.local/api'}})

        assert app.main(['-c', path]) == EXIT_STARTUP_FAILURE

    @patch('artfs.main.time.sleep', side_effect=KeyboardInterrupt)
    @patch('artfs.main.RandomEmitter')
    @patch('artfs.main.DMXReceiver')
    @patch('artfs.main.DeviceClient')
    def test_runs_until_interrupted(self, client_cls, receiver_cls, emitter_cls, _sleep,
                                    _print, _logging, config_file):
        path = config_file({'artnet': {'subnet': 1, 'universe': 2}})

        assert app.main(['-c', path, '--emit-random', '--device-host', '10.0.0.9']) == EXIT_OK

        client_cls.assert_called_once_with(host='10.0.0.9', port=80, timeout=2.0, max_workers=4)
        receiver_kwargs = receiver_cls.call_args.kwargs
        assert receiver_kwargs['universe'] == 0x12
        assert receiver_kwargs['listen_port'] == 6454
        receiver_cls.return_value.start.assert_called_once_with()
        emitter_cls.assert_called_once_with(target_ip='127.0.0.1', universe=0x12, interval=2.0, channel_count=100)

        receiver_cls.return_value.stop.assert_called_once_with()
        emitter_cls.return_value.stop.assert_called_once_with()
        client_cls.return_value.close.assert_called_once_with()

    @patch('artfs.main.DMXReceiver')
    @patch('artfs.main.DeviceClient')
    def test_bind_failure_exits(self, client_cls, receiver_cls, _print, _logging, config_file):
        receiver_cls.return_value.start.side_effect = OSError("Address already in use")

        assert app.main(['-c', config_file({})]) == EXIT_STARTUP_FAILURE
        client_cls.return_value.close.assert_called_once_with(wait=False)

    @patch('artfs.main.time.sleep', side_effect=KeyboardInterrupt)
    @patch('artfs.main.DMXReceiver')
    @patch('artfs.main.DeviceClient')
    def test_receiver_feeds_bridge(self, client_cls, receiver_cls, _sleep, _print, _logging, config_file):
        app.main(['-c', config_file({})])

        on_frame = receiver_cls.call_args.args[0]
        sent = on_frame([0, 255])

        assert [r.parameter_id for r in sent] == ['eParamID_TV_Vid1MasterGain', 'eParamID_TV_Vid1RedGain']
        assert [r.value for r in sent] == [0, 3000]
        assert client_cls.return_value.submit.call_count == 2
