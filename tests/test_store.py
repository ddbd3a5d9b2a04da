from __future__ import annotations

import asyncio

import pytest

from dof_samples import (
    BLDG_61332,
    HEADER,
    RIG_1307,
    RIG_1459,
    SAMPLE_DOF,
    SEPARATOR,
    STACK_1472,
    build_dof,
    splice,
)
from faadof.cycle import Cycle
from faadof.parsing.errors import (
    CurrencyDateHeaderNotFoundError,
    DofStreamError,
    InvalidDirectionError,
    LineTooShortError,
    MissingCurrencyDateError,
)
from faadof.store import ObstacleContainer, ObstacleStore


async def _chunks(data: bytes, size: int):
    for start in range(0, len(data), size):
        yield data[start : start + size]


def test_from_bytes_parses_sample_file() -> None:
    container = ObstacleContainer.from_bytes(SAMPLE_DOF)

    assert container.cycle == Cycle(2025, 12, 21)
    assert len(container) == 3
    assert container.error_count == 0
    assert sorted(obstacle.oas_number for obstacle in container) == [
        "01-001307",
        "01-001459",
        "01-001472",
    ]


def test_single_record_coordinates() -> None:
    container = ObstacleContainer.from_bytes(build_dof(RIG_1307))
    obstacle = container.obstacle("01-001307")

    assert obstacle is not None
    assert obstacle.latitude_deg == pytest.approx(30.179167, abs=1e-6)
    assert obstacle.longitude_deg == pytest.approx(-88.0775, abs=1e-6)


def test_bad_lines_are_reported_and_skipped() -> None:
    errors: list[tuple[type, int]] = []
    data = build_dof(RIG_1307, RIG_1459, b"INVALID LINE TOO SHORT", splice(STACK_1472, 46, b"X"))

    container = ObstacleContainer.from_bytes(data, lambda error, line: errors.append((type(error), line)))

    assert len(container) == 2
    assert container.error_count == 2
    # Three header lines and a separator precede the records, which start on line 5.
    assert errors == [(LineTooShortError, 7), (InvalidDirectionError, 8)]


def test_bad_lines_without_callback_are_counted() -> None:
    container = ObstacleContainer.from_bytes(build_dof(RIG_1307, b"short"))
    assert len(container) == 1
    assert container.error_count == 1


def test_later_duplicate_replaces_earlier_record() -> None:
    updated = splice(RIG_1307, 83, b"00300")
    container = ObstacleContainer.from_bytes(build_dof(RIG_1307, RIG_1459, updated))

    assert len(container) == 2
    assert container.obstacle("01-001307").height_ft_agl == 300


def test_header_lines_are_never_parsed_as_records() -> None:
    data = b"\n".join([HEADER, RIG_1307, RIG_1459, STACK_1472, BLDG_61332]) + b"\n"
    container = ObstacleContainer.from_bytes(data)

    assert list(container.by_id) == ["01-061332"]


def test_blank_and_separator_lines_are_skipped() -> None:
    errors: list[int] = []
    data = build_dof(RIG_1307, b"", SEPARATOR, b"-- page break --", RIG_1459, b"")
    container = ObstacleContainer.from_bytes(data, lambda error, line: errors.append(line))

    assert len(container) == 2
    assert errors == []


def test_header_only_file_gives_empty_container() -> None:
    container = ObstacleContainer.from_bytes(build_dof())
    assert container.cycle == Cycle(2025, 12, 21)
    assert len(container) == 0
    assert container.all() == []


def test_empty_input_has_no_currency_date() -> None:
    with pytest.raises(MissingCurrencyDateError):
        ObstacleContainer.from_bytes(b"")


def test_invalid_header_is_fatal() -> None:
    with pytest.raises(CurrencyDateHeaderNotFoundError):
        ObstacleContainer.from_bytes(build_dof(RIG_1307, header=b"DIGITAL OBSTACLE FILE"))


def test_crlf_input_parses_like_lf() -> None:
    container = ObstacleContainer.from_bytes(build_dof(RIG_1307, RIG_1459, newline=b"\r\n"))
    assert len(container) == 2


def test_unterminated_last_record_is_parsed() -> None:
    data = build_dof(RIG_1307) + RIG_1459.rstrip()
    assert "01-001459" in ObstacleContainer.from_bytes(data)


def test_lookup_helpers() -> None:
    container = ObstacleContainer.from_bytes(build_dof(RIG_1307, splice(BLDG_61332, 15, b"FL")))

    assert container.obstacle("99-999999") is None
    assert "01-001307" in container
    assert "99-999999" not in container
    assert [obstacle.oas_number for obstacle in container.obstacles_in("AL")] == ["01-001307"]
    assert [obstacle.oas_number for obstacle in container.obstacles_in("FL")] == ["01-061332"]
    assert container.obstacles_in("CA") == []
    assert repr(container) == "ObstacleContainer(cycle=20251221, obstacles=2)"


def test_container_mapping_is_read_only() -> None:
    container = ObstacleContainer.from_bytes(SAMPLE_DOF)
    with pytest.raises(TypeError):
        container.by_id["01-001307"] = None  # type: ignore[index]


def test_store_can_be_fed_line_by_line() -> None:
    store = ObstacleStore()
    for line in SAMPLE_DOF.splitlines():
        store.feed(line)
    container = store.finish()

    assert store.line_number == 7
    assert len(container) == 3


def test_from_path_matches_from_bytes(tmp_path) -> None:
    path = tmp_path / "DOF.DAT"
    path.write_bytes(build_dof(RIG_1307, RIG_1459, STACK_1472, newline=b"\r\n"))

    streamed = asyncio.run(ObstacleContainer.from_path(path, chunk_size=17))
    buffered = ObstacleContainer.load_path(path)

    assert streamed.cycle == buffered.cycle
    assert dict(streamed.by_id) == dict(buffered.by_id)
    assert len(streamed) == 3


def test_from_path_missing_file(tmp_path) -> None:
    with pytest.raises(DofStreamError):
        asyncio.run(ObstacleContainer.from_path(tmp_path / "missing.dat"))


def test_from_stream_single_byte_chunks() -> None:
    errors: list[int] = []
    data = build_dof(RIG_1307, b"bad", RIG_1459)

    container = asyncio.run(
        ObstacleContainer.from_stream(_chunks(data, 1), lambda error, line: errors.append(line))
    )

    assert len(container) == 2
    assert errors == [6]


def test_from_stream_failure_produces_no_container() -> None:
    async def failing():
        yield build_dof(RIG_1307)
        raise ConnectionError("reset")

    with pytest.raises(DofStreamError):
        asyncio.run(ObstacleContainer.from_stream(failing()))


def test_independent_parses_run_concurrently() -> None:
    async def run() -> list[ObstacleContainer]:
        return await asyncio.gather(
            ObstacleContainer.from_stream(_chunks(build_dof(RIG_1307), 3)),
            ObstacleContainer.from_stream(_chunks(build_dof(RIG_1459, STACK_1472), 5)),
        )

    first, second = asyncio.run(run())
    assert list(first.by_id) == ["01-001307"]
    assert sorted(second.by_id) == ["01-001459", "01-001472"]


def test_impossible_currency_date_still_builds_container() -> None:
    container = ObstacleContainer.from_bytes(build_dof(RIG_1307, header=b"  CURRENCY DATE = 04/31/25"))

    assert str(container.cycle) == "20250431"
    assert not container.cycle.is_valid
    assert len(container) == 1


def test_load_path_missing_file_is_a_stream_error(tmp_path) -> None:
    with pytest.raises(DofStreamError) as excinfo:
        ObstacleContainer.load_path(tmp_path / "missing.dat")
    assert isinstance(excinfo.value.cause, FileNotFoundError)
