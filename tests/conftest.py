from tcp_test.pytest_plugin import tcp_channel, tcp_channel_factory  # noqa: F401
