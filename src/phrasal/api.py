"""The default engine and its bound entry points."""

from phrasal.assertions.builtin import ALL_ASSERTIONS
from phrasal.engine import Engine


DEFAULT_ENGINE = Engine(ALL_ASSERTIONS)

expect = DEFAULT_ENGINE.expect
expect_async = DEFAULT_ENGINE.expect_async
use = DEFAULT_ENGINE.use
fail = DEFAULT_ENGINE.fail
it = DEFAULT_ENGINE.it
