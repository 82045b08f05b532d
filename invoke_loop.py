import json
import time
import logging
from datetime import datetime, timezone
from concurrent.futures import ThreadPoolExecutor, as_completed

import boto3

REGION = "us-west-2"
FUNCTION_NAMES = ["hello-world"]

# Each tenant gets its own execution environments on a tenant-isolated function.
# None invokes without a tenant id.
TENANT_IDS = ["tenant-42", "tenant-7", None]

N_MINUTES = 1
INTERVAL_SECONDS = N_MINUTES * 60

# Safety stop (set high, or None if you really want infinite)
MAX_ROUNDS = 60

# Threads for parallel invokes
MAX_WORKERS = 16

lambda_client = boto3.client("lambda", region_name=REGION)


def setup_logger():
    logger = logging.getLogger("environment_probe")
    logger.setLevel(logging.INFO)
    logger.handlers.clear()

    fmt = logging.Formatter("%(asctime)s %(levelname)s %(message)s")

    # Console
    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    # File
    logfile = f"environment_probe_{int(time.time())}.log"
    fh = logging.FileHandler(logfile, mode="a", encoding="utf-8")
    fh.setFormatter(fmt)
    logger.addHandler(fh)

    logger.info("Logging to file: %s", logfile)
    return logger


def target_key(fname: str, tenant_id: str | None) -> str:
    return f"{fname}[{tenant_id or '-'}]"


def invoke_one(fname: str, tenant_id: str | None = None):
    kwargs = {
        "FunctionName": fname,
        "InvocationType": "RequestResponse",
        "Payload": b"{}",
    }
    if tenant_id is not None:
        kwargs["TenantId"] = tenant_id

    resp = lambda_client.invoke(**kwargs)
    payload = json.loads(resp["Payload"].read().decode("utf-8"))
    body = json.loads(payload.get("body") or "{}")
    return target_key(fname, tenant_id), payload.get("statusCode"), body


class EnvironmentTracker:
    """Remembers which execution environment last served each target.

    `first_id` and `current_id` map a target key to the first and the most
    recent executionEnvironmentId, `last_count` to the most recent
    invocationCount. `reclaimed` holds the keys that have seen at least one
    environment change.
    """

    def __init__(self):
        self.first_id = {}
        self.current_id = {}
        self.last_count = {}
        self.reclaimed = set()

    def observe(self, key: str, body: dict) -> str:
        env_id = body["executionEnvironmentId"]
        count = body["invocationCount"]

        if key not in self.first_id:
            self.first_id[key] = env_id
            self.current_id[key] = env_id
            self.last_count[key] = count
            return "first"

        prev = self.current_id[key]
        prev_count = self.last_count[key]
        self.current_id[key] = env_id
        self.last_count[key] = count

        if prev != env_id:
            self.reclaimed.add(key)
            return "changed"
        # Invocations from other callers may land in between, so only a
        # non-increasing count is suspicious.
        if count <= prev_count:
            return "regressed"
        return "same"


def main():
    logger = setup_logger()

    targets = [(fn, tenant) for fn in FUNCTION_NAMES for tenant in TENANT_IDS]
    total = len(targets)
    tracker = EnvironmentTracker()

    round_num = 0
    while True:
        round_num += 1
        round_ts = datetime.now(timezone.utc).isoformat()
        t0 = time.time()

        logger.info("=== Round %d @ %s | reclaimed %d/%d ===", round_num, round_ts, len(tracker.reclaimed), total)

        errors = 0
        changed_this_round = 0

        with ThreadPoolExecutor(max_workers=MAX_WORKERS) as ex:
            futures = {ex.submit(invoke_one, fn, tenant): target_key(fn, tenant) for fn, tenant in targets}
            for fut in as_completed(futures):
                key = futures[fut]
                try:
                    _, status, body = fut.result()
                except Exception as e:
                    errors += 1
                    logger.warning("%s invoke failed: %s", key, e)
                    continue

                if status != 200 or "executionEnvironmentId" not in body:
                    errors += 1
                    logger.warning("%s unexpected response. status=%s body=%s", key, status, body)
                    continue

                outcome = tracker.observe(key, body)
                env_id = body["executionEnvironmentId"]
                count = body["invocationCount"]
                if outcome == "first":
                    logger.info("%s: FIRST environment=%s count=%d", key, env_id, count)
                elif outcome == "changed":
                    changed_this_round += 1
                    logger.info("%s: CHANGED new=%s count=%d  (reclaimed %d/%d)", key, env_id, count, len(tracker.reclaimed), total)
                elif outcome == "regressed":
                    logger.warning("%s: count did not increase in environment=%s count=%d", key, env_id, count)
                else:
                    logger.info("%s: same environment=%s count=%d", key, env_id, count)

        # Stop condition: all have changed at least once
        if len(tracker.reclaimed) == total:
            logger.info("DONE: all %d targets observed at least one environment change.", total)
            break

        # Safety stop
        if MAX_ROUNDS is not None and round_num >= MAX_ROUNDS:
            logger.info("STOP: reached MAX_ROUNDS=%d. reclaimed %d/%d.", MAX_ROUNDS, len(tracker.reclaimed), total)
            break

        # Sleep until next interval
        elapsed = time.time() - t0
        sleep_s = max(0, INTERVAL_SECONDS - elapsed)
        logger.info("Round summary: changed_this_round=%d errors=%d sleep=%.1fs", changed_this_round, errors, sleep_s)
        time.sleep(sleep_s)


if __name__ == "__main__":
    main()
