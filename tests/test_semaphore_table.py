import io

import pytest

from philosim.config import Settings
from philosim.semaphore_table import (
    DIED,
    EATING,
    SLEEPING,
    TAKEN_FORK,
    THINKING,
    SemaphoreTable,
    main,
)

_KNOWN = {TAKEN_FORK, EATING, SLEEPING, THINKING, DIED}


def _run(settings):
    out = io.StringIO()
    table = SemaphoreTable(settings, out)
    table.run()
    return table, out.getvalue().splitlines()


def _parse(line):
    stamp, philo_id, message = line.split(" ", 2)
    return int(stamp), int(philo_id), message


def test_not_dead_before_run():
    table = SemaphoreTable(Settings(3, 400, 100, 100), io.StringIO())
    assert table.check_death() is False
    assert [seat.philo_id for seat in table.seats] == [1, 2, 3]


def test_safe_print_writes_formatted_line():
    out = io.StringIO()
    table = SemaphoreTable(Settings(2, 400, 100, 100), out)
    assert table.safe_print(table.seats[1], THINKING) is True
    stamp, philo_id, message = _parse(out.getvalue().rstrip("\n"))
    assert philo_id == 2
    assert message == THINKING
    assert stamp >= 0


def test_single_philosopher_takes_fork_and_dies():
    table, lines = _run(Settings(1, 60, 10, 10))
    assert [_parse(line)[2] for line in lines] == [TAKEN_FORK, DIED]
    assert all(_parse(line)[1] == 1 for line in lines)
    assert _parse(lines[-1])[0] >= 60
    assert table.check_death() is True


def test_starvation_reports_exactly_one_death_last():
    table, lines = _run(Settings(4, 100, 200, 100))
    messages = [_parse(line)[2] for line in lines]
    assert messages.count(DIED) == 1
    assert messages[-1] == DIED
    assert table.check_death() is True


def test_nothing_printed_after_death():
    out = io.StringIO()
    table = SemaphoreTable(Settings(4, 100, 200, 100), out)
    table.run()
    before = out.getvalue()
    assert table.safe_print(table.seats[0], EATING) is False
    assert out.getvalue() == before


def test_timestamps_never_decrease():
    _, lines = _run(Settings(4, 100, 200, 100))
    stamps = [_parse(line)[0] for line in lines]
    assert stamps == sorted(stamps)


def test_meal_limit_ends_without_death():
    table, lines = _run(Settings(3, 800, 40, 40, 2))
    messages = [_parse(line)[2] for line in lines]
    assert DIED not in messages
    assert set(messages) <= _KNOWN
    assert all(seat.meals_eaten >= 2 for seat in table.seats)
    assert all(seat.full for seat in table.seats)
    assert table.check_death() is False


def test_each_eating_line_follows_two_forks():
    _, lines = _run(Settings(3, 800, 40, 40, 2))
    per_seat = {}
    for line in lines:
        _, philo_id, message = _parse(line)
        per_seat.setdefault(philo_id, []).append(message)
    for messages in per_seat.values():
        for index, message in enumerate(messages):
            if message == EATING:
                assert messages[index - 2 : index] == [TAKEN_FORK, TAKEN_FORK]


def test_zero_meals_stops_without_death():
    table, lines = _run(Settings(2, 800, 40, 40, 0))
    assert DIED not in [_parse(line)[2] for line in lines]
    assert all(seat.full for seat in table.seats)


@pytest.mark.parametrize(
    "argv, message",
    [
        (["1", "2", "3"], "Error : The arguments number not valid!"),
        (["1", "2", "3", "4", "5", "6"], "Error : The arguments number not valid!"),
        (["1", "abc", "3", "4"], "Error : An or More Arguments not valid"),
        (["0", "100", "100", "100"], "Error : An argument is unacceptable"),
        (["2", "100", "100", "100", "99999999999"], "Error : An argument is unacceptable"),
    ],
)
def test_main_rejects_bad_arguments(argv, message, capsys):
    assert main(argv) == 1
    assert message in capsys.readouterr().out


def test_main_runs_single_philosopher(capsys):
    assert main(["1", "30", "10", "10"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[-1].endswith("1 died")
    assert lines[0].endswith("1 has taken a fork")