"""UDM building blocks for 5G cores: context, event exposure, callbacks, NRF client and SQN helpers."""

__version__ = "1.0.0"