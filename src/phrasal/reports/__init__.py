from .console import print_failure, render_failure


__all__ = ["print_failure", "render_failure"]
