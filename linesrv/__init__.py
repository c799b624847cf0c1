"""Line-oriented TCP servers (echo, factorial, timer, worker pool) and a client for them."""

__version__ = "0.1.0"
__all__ = ["echo_server", "factorial_server", "client", "timer_server", "pool_server"]