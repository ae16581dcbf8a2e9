# philosim

A console simulation of the dining philosophers problem. Each philosopher
takes two forks, eats, sleeps and thinks. The simulation stops when one
philosopher starves or when every philosopher has eaten the required number
of meals.

The package has two variants:

- `philo` (`philosim.table.Table`) gives each fork its own lock. Each
  philosopher picks up the fork on its left and then the fork on its right.
  One monitor thread watches for starvation and for full philosophers.
- `philo-bonus` (`philosim.semaphore_table.SemaphoreTable`) keeps all forks in
  one shared counting semaphore. Each philosopher has its own watcher thread,
  which reports starvation or marks the philosopher as full.

Both variants run every philosopher as a thread inside a single Python
process.

## Installation

```
pip install .
```

## Usage

```
philo number_of_philosophers time_to_die time_to_eat time_to_sleep [meals_required]
philo-bonus number_of_philosophers time_to_die time_to_eat time_to_sleep [meals_required]
```

The times are in milliseconds. Every argument must be a non-negative decimal
integer and may have a leading `+`. The first four must be greater than zero,
and no value may go beyond the 32-bit signed range. The command takes four or
five arguments. If the count is wrong, or an argument is not valid or not
acceptable, the command prints an error in red and exits with status 1.

Example:

```
philo 5 800 200 200 7
```

Each state change prints one line: the milliseconds since the start, then the
philosopher's number, then the event. The events are `has taken a fork`,
`is eating`, `is sleeping`, `is thinking` and `died`. The times depend on
scheduling, so a run looks roughly like this:

```
0 1 has taken a fork
0 1 has taken a fork
0 1 is eating
200 1 is sleeping
400 1 is thinking
...
```

When a philosopher goes longer than `time_to_die` without starting a meal, a
`<time> <id> died` line is printed and the other philosophers stop printing.
A lone philosopher takes one fork, waits `time_to_die` and dies.

## Library use

```python
import io
from philosim.config import parse_settings
from philosim.table import Table
from philosim.semaphore_table import SemaphoreTable

settings = parse_settings(["4", "410", "200", "200", "3"])

out = io.StringIO()
Table(settings, out).run()
print(out.getvalue())

out = io.StringIO()
SemaphoreTable(settings, out).run()
print(out.getvalue())
```

`philosim.config`:

- `Settings` is a frozen dataclass with the fields `n_philos`, `time_to_die`,
  `time_to_eat`, `time_to_sleep` and `max_meals`. `max_meals` is `None` when
  no meal count is given.
- `parse_settings(args)` builds `Settings` from the arguments that follow the
  program name. It raises `ConfigError`, a `ValueError` whose `kind` is
  `"count"`, `"format"` or `"value"`.
- `is_valid_args(args)` tells whether every argument is an optional `+`
  followed by one or more digits.
- `parse_int(text)` reads a leading signed decimal integer. It skips leading
  whitespace and stops at the first non-digit. It raises `ConfigError` when
  the value falls outside the 32-bit signed range.

`philosim.clock`:

- `timestamp_ms()` returns the wall-clock time in whole milliseconds.
- `wait_ms(duration_ms, stop)` waits, and returns early with `False` once
  `stop()` returns true.

`Table` also offers `death_check(index)`, `meals_check()`,
`safe_print(philosopher, message)` and the `stopped` property. Its
`philosophers` list holds `Philosopher` records with `meals_eaten` and
`last_meal_time`. `SemaphoreTable` offers `check_death()` and
`safe_print(seat, message)`. Its `seats` list holds `Seat` records.

## Tests

```
pip install .[test]
pytest
```