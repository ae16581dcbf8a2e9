"""Dining philosophers where forks are a shared counting semaphore.

Each seat runs its own worker together with a private watcher that
notices starvation or a full stomach, mirroring one process per
philosopher with a monitor thread inside it.
"""

from __future__ import annotations

import sys
import threading
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
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

_PAUSE = 0.0001
_ACQUIRE_POLL = 0.001


@dataclass(eq=False)
class Seat:
    """One philosopher's place at the table."""

    philo_id: int
    last_meal_time: int = 0
    meals_eaten: int = 0
    full: bool = False


class SemaphoreTable:
    """Runs a simulation where all forks sit in the middle of the table."""

    def __init__(self, settings: Settings, out: TextIO | None = None) -> None:
        self.settings = settings
        self.out = out if out is not None else sys.stdout
        self._forks = threading.Semaphore(settings.n_philos)
        self._died_lock = threading.Lock()
        self._print_sem = threading.Semaphore(1)
        self._meal_lock = threading.Lock()
        self._state = threading.Semaphore(1)
        self._someone_died = False
        now = timestamp_ms()
        self.seats = [
            Seat(philo_id=index + 1, last_meal_time=now)
            for index in range(settings.n_philos)
        ]
        self.start_time = now

    def check_death(self) -> bool:
        """Tell whether a philosopher has died."""
        with self._died_lock:
            return self._someone_died

    def _flag_death(self) -> None:
        with self._died_lock:
            self._someone_died = True

    def _stopped(self, seat: Seat) -> bool:
        return self.check_death() or seat.full

    def _acquire(self, semaphore: threading.Semaphore, stop: Callable[[], bool]) -> bool:
        while not semaphore.acquire(timeout=_ACQUIRE_POLL):
            if stop():
                return False
        return True

    def _write(self, philo_id: int, message: str) -> None:
        self.out.write(f"{timestamp_ms() - self.start_time} {philo_id} {message}\n")
        self.out.flush()

    def safe_print(self, seat: Seat, message: str) -> bool:
        """Print a state line for ``seat`` unless its simulation has stopped.

        Returns True when the line was written and the seat is still
        running afterwards.
        """
        if self._stopped(seat):
            return False
        if not self._acquire(self._print_sem, lambda: self._stopped(seat)):
            return False
        try:
            if self._stopped(seat):
                return False
            self._write(seat.philo_id, message)
        finally:
            self._print_sem.release()
        return not self._stopped(seat)

    def _announce_death(self, seat: Seat) -> None:
        if not self._acquire(self._print_sem, self.check_death):
            return
        try:
            if self.check_death():
                return
            self._write(seat.philo_id, DIED)
            self._flag_death()
        finally:
            self._print_sem.release()

    def _wait(self, seat: Seat, duration_ms: int) -> None:
        wait_ms(duration_ms, lambda: self._stopped(seat))

    def _eat(self, seat: Seat) -> None:
        def stop() -> bool:
            return self._stopped(seat)

        if not self._acquire(self._state, stop):
            return
        held = 0
        try:
            try:
                for _ in range(2):
                    if not self._acquire(self._forks, stop):
                        return
                    held += 1
                    self.safe_print(seat, TAKEN_FORK)
                with self._meal_lock:
                    seat.last_meal_time = timestamp_ms()
                    seat.meals_eaten += 1
            finally:
                self._state.release()
            self.safe_print(seat, EATING)
            self._wait(seat, self.settings.time_to_eat)
        finally:
            for _ in range(held):
                self._forks.release()

    def _watch(self, seat: Seat) -> None:
        max_meals = self.settings.max_meals
        while not self.check_death():
            with self._meal_lock:
                starving = (
                    timestamp_ms() - seat.last_meal_time > self.settings.time_to_die
                )
                full = max_meals is not None and seat.meals_eaten >= max_meals
            if starving:
                self._announce_death(seat)
                return
            if full:
                seat.full = True
                return
            time.sleep(_PAUSE)

    def _live(self, seat: Seat) -> None:
        watcher = threading.Thread(target=self._watch, args=(seat,), daemon=True)
        watcher.start()
        while not self._stopped(seat):
            self._eat(seat)
            time.sleep(_PAUSE)
            if not self.safe_print(seat, SLEEPING):
                break
            self._wait(seat, self.settings.time_to_sleep)
            if not self.safe_print(seat, THINKING):
                break
        watcher.join()

    def _alone(self) -> None:
        seat = self.seats[0]
        self._forks.acquire()
        try:
            self.safe_print(seat, TAKEN_FORK)
            self._wait(seat, self.settings.time_to_die)
            self.safe_print(seat, DIED)
        finally:
            self._forks.release()
        self._flag_death()

    def run(self) -> None:
        """Run until a philosopher dies or every philosopher is full."""
        self.start_time = timestamp_ms()
        if len(self.seats) == 1:
            self._alone()
            return
        workers = [
            threading.Thread(target=self._live, args=(seat,), daemon=True)
            for seat in self.seats
        ]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()


def _error(message: str) -> int:
    print(f"{RED}{message}{RESET}")
    return 1


def main(argv: Sequence[str] | None = None) -> int:
    """Parse the arguments and run the semaphore-based simulation."""
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        settings = parse_settings(args)
    except ConfigError as exc:
        if exc.kind == "count":
            return _error("Error : The arguments number not valid!")
        if exc.kind == "format":
            return _error("Error : An or More Arguments not valid")
        return _error("Error : An argument is unacceptable")
    SemaphoreTable(settings).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())