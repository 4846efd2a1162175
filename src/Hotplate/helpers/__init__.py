"""Subprocess entry points used by :func:`Hotplate.run_solver`."""
