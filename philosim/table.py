"""Dining philosophers simulated with one thread per philosopher."""

from __future__ import annotations

import sys
import threading
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TextIO

from philosim.clock import timestamp_ms, wait_ms
from philosim.config import ConfigError, Settings, parse_settings

RED = "\033[0;31m"
RESET = "\033[0m"

TAKEN_FORK = "has taken a fork"
EATING = "is eating"
SLEEPING = "is sleeping"
THINKING = "is thinking"
DIED = "died"

_MONITOR_PAUSE = 0.0005
_EVEN_START_DELAY = 0.0005
_FORK_POLL = 0.001


@dataclass(eq=False)
class Philosopher:
    """One seat at the table and the two forks next to it."""

    philo_id: int
    left_fork: threading.Lock = field(repr=False)
    right_fork: threading.Lock = field(repr=False)
    meals_eaten: int = 0
    last_meal_time: int = 0


class Table:
    """Runs a simulation where philosophers share mutex forks."""

    def __init__(self, settings: Settings, out: TextIO | None = None) -> None:
        self.settings = settings
        self.out = out if out is not None else sys.stdout
        self._mutex = threading.Lock()
        self._meal_lock = threading.Lock()
        self._someone_died = False
        self.start_time = timestamp_ms()
        count = settings.n_philos
        self.forks = [threading.Lock() for _ in range(count)]
        now = timestamp_ms()
        self.philosophers = [
            Philosopher(
                philo_id=index + 1,
                left_fork=self.forks[index],
                right_fork=self.forks[(index + 1) % count],
                last_meal_time=now,
            )
            for index in range(count)
        ]

    @property
    def stopped(self) -> bool:
        """True once a philosopher died or everyone has eaten enough."""
        with self._mutex:
            return self._someone_died

    def _stop(self) -> None:
        with self._mutex:
            self._someone_died = True

    def _write(self, timestamp: int, philo_id: int, message: str) -> None:
        self.out.write(f"{timestamp} {philo_id} {message}\n")
        self.out.flush()

    def safe_print(self, philosopher: Philosopher, message: str) -> bool:
        """Print a state line unless the simulation has stopped.

        Returns True when the line was written.
        """
        with self._mutex:
            if self._someone_died:
                return False
            self._write(timestamp_ms() - self.start_time, philosopher.philo_id, message)
            return True

    def death_check(self, index: int) -> bool:
        """Report and flag a death if philosopher ``index`` has starved."""
        philosopher = self.philosophers[index]
        with self._meal_lock:
            now = timestamp_ms()
            starving = now - philosopher.last_meal_time > self.settings.time_to_die
        if not starving:
            return False
        with self._mutex:
            if not self._someone_died:
                self._someone_died = True
                self._write(now - self.start_time, philosopher.philo_id, DIED)
        return True

    def meals_check(self) -> bool:
        """Stop the simulation once every philosopher has eaten enough."""
        max_meals = self.settings.max_meals
        if max_meals is None:
            return False
        with self._meal_lock:
            full = sum(p.meals_eaten >= max_meals for p in self.philosophers)
        if full == len(self.philosophers):
            self._stop()
            return True
        return False

    def _wait(self, duration_ms: int) -> None:
        wait_ms(duration_ms, lambda: self.stopped)

    def _take(self, fork: threading.Lock) -> bool:
        while not fork.acquire(timeout=_FORK_POLL):
            if self.stopped:
                return False
        return True

    def _eat(self, philosopher: Philosopher) -> None:
        if not self._take(philosopher.left_fork):
            return
        try:
            self.safe_print(philosopher, TAKEN_FORK)
            if not self._take(philosopher.right_fork):
                return
            try:
                self.safe_print(philosopher, TAKEN_FORK)
                if self.stopped:
                    return
                self.safe_print(philosopher, EATING)
                with self._meal_lock:
                    philosopher.last_meal_time = timestamp_ms()
                    philosopher.meals_eaten += 1
                self._wait(self.settings.time_to_eat)
            finally:
                philosopher.right_fork.release()
        finally:
            philosopher.left_fork.release()

    def _live(self, philosopher: Philosopher) -> None:
        if philosopher.philo_id % 2 == 0:
            time.sleep(_EVEN_START_DELAY)
        while not self.stopped:
            self._eat(philosopher)
            self.safe_print(philosopher, SLEEPING)
            self._wait(self.settings.time_to_sleep)
            self.safe_print(philosopher, THINKING)

    def _monitor(self) -> None:
        while True:
            if any(self.death_check(i) for i in range(len(self.philosophers))):
                return
            if self.meals_check():
                return
            time.sleep(_MONITOR_PAUSE)

    def _alone(self) -> None:
        philosopher = self.philosophers[0]
        with philosopher.left_fork:
            self.safe_print(philosopher, TAKEN_FORK)
            self._wait(self.settings.time_to_die)
            with self._mutex:
                self._someone_died = True
                self._write(
                    timestamp_ms() - self.start_time, philosopher.philo_id, DIED
                )

    def run(self) -> None:
        """Run the simulation until someone dies or everyone is full."""
        if len(self.philosophers) == 1:
            self._alone()
            return
        threads = [
            threading.Thread(target=self._live, args=(p,), daemon=True)
            for p in self.philosophers
        ]
        for thread in threads:
            thread.start()
        monitor = threading.Thread(target=self._monitor, daemon=True)
        monitor.start()
        for thread in threads:
            thread.join()
        monitor.join()


def _error(message: str) -> int:
    print(f"{RED}{message}{RESET}")
    return 1


def main(argv: Sequence[str] | None = None) -> int:
    """Parse the arguments and run the threaded simulation."""
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        settings = parse_settings(args)
    except ConfigError as exc:
        if exc.kind == "count":
            return _error("Error: invalid argument(s).")
        if exc.kind == "format":
            return _error("Error : An or More Arguments not valid!")
        return _error("Error: Initialization failed.")
    Table(settings).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())