"""Centralized constants for brick analysis."""

# Default brick step, in price units. Matches the step the chart opens with.
DEFAULT_STEP_SIZE = 25.0

# Upper bound on bricks a single source bar may emit. A bar that would exceed
# it almost always means the step size is misconfigured (e.g. near zero).
MAX_BRICKS_PER_BAR = 10_000

# Shown to callers when a non-empty series yields no bricks.
NO_BRICKS_MESSAGE = "No bricks produced with step size {step_size}; try a smaller step"
INVALID_STEP_MESSAGE = "Step size must be a positive finite number, got {step_size}"

# Brick series the server keeps memoized per step size, least recently used first out.
BRICK_CACHE_SIZE = 16
