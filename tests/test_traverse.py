import asyncio

from lazytask import Settled, Task, pair, traverse_m, triple
from fakes import Channels, delayed, delayed_failure, fork_recording, logged

ERR_A = ValueError("a")
ERR_B = ValueError("b")


def test_all_resolves_in_index_order() -> None:
    channels = fork_recording(Task.all([Task.of(1), Task.of(2), Task.of(3)]))
    assert channels.successes == [[1, 2, 3]]


def test_all_orders_by_index_not_settlement() -> None:
    async def run_flow():
        return await Task.all([delayed(0.03, 1), delayed(0.02, 2), delayed(0.01, 3)])

    assert asyncio.run(run_flow()) == [1, 2, 3]


def test_all_synchronous_failures_report_first_in_index_order() -> None:
    channels = fork_recording(Task.all([Task.of(1), Task.rejected(ERR_A), Task.rejected(ERR_B)]))
    assert channels.failures == [ERR_A]
    assert channels.successes == []


def test_all_concurrent_failures_report_first_to_settle() -> None:
    async def run_flow():
        channels = Channels()
        task = Task.all([delayed(0.01, 1), delayed_failure(0.03, ERR_A), delayed_failure(0.02, ERR_B)])
        task.fork(channels.reject, channels.resolve)
        await asyncio.sleep(0.06)
        return channels

    channels = asyncio.run(run_flow())
    assert channels.failures == [ERR_B]
    assert channels.calls == 1


def test_all_forks_every_item_before_any_settles() -> None:
    async def run_flow():
        log: list[str] = []
        await Task.all([logged(log, "a", delayed(0.02, "a")), logged(log, "b", delayed(0.01, "b"))])
        return log

    assert asyncio.run(run_flow()) == ["fork:a", "fork:b", "settle:b", "settle:a"]


def test_all_seq_runs_items_one_at_a_time() -> None:
    async def run_flow():
        log: list[str] = []
        values = await Task.all_seq(
            [logged(log, "a", delayed(0.02, "a")), logged(log, "b", delayed(0.01, "b"))]
        )
        return values, log

    values, log = asyncio.run(run_flow())
    assert values == ["a", "b"]
    assert log == ["fork:a", "settle:a", "fork:b", "settle:b"]


def test_all_seq_stops_at_first_failure() -> None:
    log: list[str] = []
    channels = fork_recording(
        Task.all_seq(
            [
                logged(log, "a", Task.of(1)),
                logged(log, "b", Task.rejected(ERR_A)),
                logged(log, "c", Task.of(3)),
            ]
        )
    )
    assert channels.failures == [ERR_A]
    assert log == ["fork:a", "settle:a", "fork:b", "fail:b"]


def test_all_settled_never_fails() -> None:
    channels = fork_recording(Task.all_settled([Task.of(1), Task.rejected(ERR_A)]))

    assert channels.failures == []
    [results] = channels.successes
    assert results == [Settled.success(1), Settled.failed(ERR_A)]
    assert results[0].right() == 1
    assert results[1].left() is ERR_A


def test_all_settled_orders_by_index_not_settlement() -> None:
    async def run_flow():
        return await Task.all_settled(
            [delayed_failure(0.03, ERR_A), delayed(0.01, 2), delayed_failure(0.02, ERR_B)]
        )

    results = asyncio.run(run_flow())
    assert [r.status for r in results] == ["failed", "success", "failed"]
    assert results[0].left() is ERR_A
    assert results[2].left() is ERR_B


def test_all_settled_seq_runs_every_item_in_order() -> None:
    log: list[str] = []
    channels = fork_recording(
        Task.all_settled_seq(
            [
                logged(log, "a", Task.rejected(ERR_A)),
                logged(log, "b", Task.of(2)),
            ]
        )
    )
    assert channels.successes == [[Settled.failed(ERR_A), Settled.success(2)]]
    assert log == ["fork:a", "fail:a", "fork:b", "settle:b"]


def test_array_traverse_a_maps_and_combines_in_order() -> None:
    async def run_flow():
        return await Task.array_traverse_a(lambda n: delayed(0.01 * (4 - n), n * 10), [1, 2, 3])

    assert asyncio.run(run_flow()) == [10, 20, 30]


def test_array_traverse_a_is_lazy() -> None:
    calls: list[int] = []

    def to_task(n: int) -> Task:
        calls.append(n)
        return Task.of(n)

    task = Task.array_traverse_a(to_task, [1, 2])
    assert calls == []

    assert fork_recording(task).successes == [[1, 2]]
    assert fork_recording(task).successes == [[1, 2]]
    assert calls == [1, 2, 1, 2]


def test_array_traverse_m_stops_before_building_later_tasks() -> None:
    calls: list[int] = []

    def to_task(n: int) -> Task:
        calls.append(n)
        return Task.of(n) if n > 2 else Task.rejected("fail")

    channels = fork_recording(Task.array_traverse_m(to_task, [1, 2, 3, 4, 5]))
    assert channels.failures == ["fail"]
    assert calls == [1]


def test_array_traverse_m_runs_sequentially() -> None:
    async def run_flow():
        log: list[str] = []
        values = await traverse_m(
            lambda n: logged(log, str(n), delayed(0.01, n)),
            [1, 2, 3],
        )
        return values, log

    values, log = asyncio.run(run_flow())
    assert values == [1, 2, 3]
    assert log == ["fork:1", "settle:1", "fork:2", "settle:2", "fork:3", "settle:3"]


def test_empty_collections_resolve_with_empty_list() -> None:
    assert fork_recording(Task.all([])).successes == [[]]
    assert fork_recording(Task.all_seq([])).successes == [[]]
    assert fork_recording(Task.all_settled([])).successes == [[]]
    assert fork_recording(Task.all_settled_seq([])).successes == [[]]
    assert fork_recording(Task.array_traverse_a(Task.of, [])).successes == [[]]
    assert fork_recording(Task.array_traverse_m(Task.of, [])).successes == [[]]


def test_long_synchronous_collections_do_not_grow_the_stack() -> None:
    tasks = [Task.of(n) for n in range(5000)]

    assert fork_recording(Task.all_seq(tasks)).successes == [list(range(5000))]
    assert fork_recording(Task.all(tasks)).successes == [list(range(5000))]
    assert fork_recording(Task.array_traverse_m(Task.of, range(5000))).successes == [
        list(range(5000))
    ]


def test_collections_accept_generators() -> None:
    task = Task.all(Task.of(n) for n in range(3))
    assert fork_recording(task).successes == [[0, 1, 2]]
    assert fork_recording(task).successes == [[0, 1, 2]]


def test_pair_and_triple() -> None:
    assert fork_recording(pair(Task.of(1), Task.of("a"))).successes == [(1, "a")]
    assert fork_recording(triple(Task.of(1), Task.of("a"), Task.of(True))).successes == [
        (1, "a", True)
    ]
    assert fork_recording(pair(Task.of(1), Task.rejected(ERR_A))).failures == [ERR_A]


def test_pair_runs_both_concurrently() -> None:
    async def run_flow():
        return await pair(delayed(0.02, "slow"), delayed(0.01, "fast"))

    assert asyncio.run(run_flow()) == ("slow", "fast")
