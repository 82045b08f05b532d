"""Tests for per-environment state."""

import uuid
from concurrent.futures import ThreadPoolExecutor

from hello_world import ExecutionEnvironment


class TestExecutionEnvironment:
    def test_new_environment_starts_at_zero(self) -> None:
        env = ExecutionEnvironment()
        assert env.invocation_count == 0

    def test_environment_id_is_uuid(self) -> None:
        env = ExecutionEnvironment()
        assert str(uuid.UUID(env.environment_id)) == env.environment_id

    def test_record_invocation_counts_from_one(self) -> None:
        env = ExecutionEnvironment()
        assert [env.record_invocation() for _ in range(3)] == [1, 2, 3]
        assert env.invocation_count == 3

    def test_environment_id_stable_across_invocations(self) -> None:
        env = ExecutionEnvironment()
        env_id = env.environment_id
        env.record_invocation()
        env.record_invocation()
        assert env.environment_id == env_id

    def test_distinct_environments_do_not_share_state(self) -> None:
        first = ExecutionEnvironment()
        second = ExecutionEnvironment()
        first.record_invocation()
        first.record_invocation()

        assert first.environment_id != second.environment_id
        assert second.invocation_count == 0
        assert second.record_invocation() == 1

    def test_concurrent_increments_are_not_lost(self) -> None:
        """Threads sharing one environment must each get a unique count."""
        env = ExecutionEnvironment()
        with ThreadPoolExecutor(max_workers=8) as ex:
            counts = list(ex.map(lambda _: env.record_invocation(), range(1000)))

        assert env.invocation_count == 1000
        assert sorted(counts) == list(range(1, 1001))
