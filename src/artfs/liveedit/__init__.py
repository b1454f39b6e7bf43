from .client import LiveEditClient, LiveEditError

__all__ = ['LiveEditClient', 'LiveEditError']
