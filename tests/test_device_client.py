"""
Test device HTTP client and value serialization
"""
import logging
import threading
from unittest.mock import MagicMock

import pytest
import requests

from artfs.device.client import DeviceClient, OutboundRequest, format_value


class TestFormatValue:

    @pytest.mark.parametrize("value, expected", [
        (1000, "1000"),
        (-1000, "-1000"),
        (0, "0"),
        (1000.0, "1000"),
        (-1000.0, "-1000"),
        (1000.5, "1000.5"),
        (1000 * 63 / 127, "496.063"),
        (1000 * 64 / 127, "503.937"),
        (0.0004, "0"),
        (-0.0004, "0"),
        (2999.9999, "3000"),
    ])
    def test_format(self, value, expected):
        assert format_value(value) == expected


class TestOutboundRequest:

    def test_params(self):
        request = OutboundRequest('eParamID_TV_Vid1MasterGain', 1000 * 63 / 127)
        assert request.to_params() == {
            'action': 'set',
            'paramid': 'eParamID_TV_Vid1MasterGain',
            'value': '496.063'
        }


class TestDeviceClient:

    @pytest.fixture
    def client(self):
        client = DeviceClient(host='192.168.10.40', port=80, timeout=1.5, max_workers=1)
        client.session = MagicMock()
        yield client
        client.close()

    def test_url(self, client):
        assert client.url == 'http://192.168.10.40:80/config'

    def test_send(self, client):
        response = client.send(OutboundRequest('eParamID_TV_Vid1RedLift', -1000.0))

        client.session.get.assert_called_once_with(
            'http://192.168.10.40:80/config',
            params={'action': 'set', 'paramid': 'eParamID_TV_Vid1RedLift', 'value': '-1000'},
            timeout=1.5
        )
        response.raise_for_status.assert_called_once_with()

    def test_send_raises_on_http_error(self, client):
        client.session.get.return_value.raise_for_status.side_effect = requests.HTTPError("500")
        with pytest.raises(requests.HTTPError):
            client.send(OutboundRequest('p', 1))

    def test_submit_success(self, client):
        future = client.submit(OutboundRequest('eParamID_TV_Vid1MasterGain', 1000))
        assert future.result(timeout=5) is True
        assert client.get_stats() == {'sent': 1, 'failed': 0, 'coalesced': 0}

    def test_submit_preserves_issue_order(self, client):
        futures = [client.submit(OutboundRequest(f'p{i}', i)) for i in range(5)]
        for future in futures:
            future.result(timeout=5)

        sent = [c.kwargs['params']['paramid'] for c in client.session.get.call_args_list]
        assert sent == ['p0', 'p1', 'p2', 'p3', 'p4']

    @pytest.mark.parametrize("error", [
        requests.ConnectionError("refused"),
        requests.Timeout("timed out"),
    ])
    def test_submit_failure_is_logged_not_raised(self, client, caplog, error):
        client.session.get.side_effect = error

        with caplog.at_level(logging.WARNING, logger='artfs.device.client'):
            future = client.submit(OutboundRequest('eParamID_TV_Vid1BlueGain', 1000 * 63 / 127))
            assert future.result(timeout=5) is False

        assert client.get_stats() == {'sent': 0, 'failed': 1, 'coalesced': 0}
        assert 'paramid=eParamID_TV_Vid1BlueGain' in caplog.text
        assert 'value=496.063' in caplog.text

    def test_submit_non_2xx_counts_as_failure(self, client):
        client.session.get.return_value.raise_for_status.side_effect = requests.HTTPError("404")
        assert client.submit(OutboundRequest('p', 1)).result(timeout=5) is False
        assert client.get_stats()['failed'] == 1

    def test_queued_value_replaced_by_newer_one(self, client):
        release = threading.Event()

        def get(url, params, timeout):
            if params['paramid'] == 'busy':
                release.wait(5)
            return MagicMock()

        client.session.get.side_effect = get

        busy = client.submit(OutboundRequest('busy', 0))
        first = client.submit(OutboundRequest('eParamID_TV_Vid1RedGain', 100))
        second = client.submit(OutboundRequest('eParamID_TV_Vid1RedGain', 200))
        release.set()

        assert second is first
        assert busy.result(timeout=5) is True
        assert first.result(timeout=5) is True

        sent = [(c.kwargs['params']['paramid'], c.kwargs['params']['value'])
                for c in client.session.get.call_args_list]
        assert sent == [('busy', '0'), ('eParamID_TV_Vid1RedGain', '200')]
        assert client.get_stats() == {'sent': 2, 'failed': 0, 'coalesced': 1}

    def test_parameter_requeued_after_send_starts(self, client):
        client.submit(OutboundRequest('p', 1)).result(timeout=5)
        client.submit(OutboundRequest('p', 2)).result(timeout=5)

        values = [c.kwargs['params']['value'] for c in client.session.get.call_args_list]
        assert values == ['1', '2']
        assert client.get_stats()['coalesced'] == 0
