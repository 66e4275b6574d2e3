import base64
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from flask import current_app

logger = logging.getLogger(__name__)

HOUR_MS = 60 * 60 * 1000
MINUTE_MS = 60 * 1000


def now_ms() -> int:
    return int(time.time() * 1000)


def format_duration(milliseconds: int) -> str:
    """
    "1h 0m", "1m 30s" or "5s": hours+minutes, else minutes+seconds, else seconds.
    """
    milliseconds = max(int(milliseconds), 0)
    hours = milliseconds // HOUR_MS
    minutes = (milliseconds % HOUR_MS) // MINUTE_MS
    seconds = (milliseconds % MINUTE_MS) // 1000

    if hours > 0:
        return f"{hours}h {minutes}m"
    if minutes > 0:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


def _b64_prefix(value: str, length: int) -> str:
    return base64.b64encode(value.encode("utf-8")).decode("ascii")[:length]


def client_ip(request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return (
        request.headers.get("X-Real-IP")
        or getattr(request, "remote_addr", None)
        or "127.0.0.1"
    )


@dataclass
class AttemptRecord:
    count: int
    first_attempt: int
    last_attempt: int
    distinct_secrets: set = field(default_factory=set)
    distinct_auxiliary_ids: set = field(default_factory=set)


@dataclass
class BlockRecord:
    level: int
    blocked_until: int
    attempts: int
    first_violation: int


@dataclass(frozen=True)
class LockoutPolicy:
    max_attempts_level1: int = 3
    cooldown_level1: int = 10 * MINUTE_MS
    max_attempts_level2: int = 6
    cooldown_level2: int = 24 * HOUR_MS
    cleanup_interval: int = HOUR_MS

    @classmethod
    def from_config(cls, config) -> "LockoutPolicy":
        return cls(
            max_attempts_level1=int(config.get("LOCKOUT_LEVEL1_MAX_ATTEMPTS", 3)),
            cooldown_level1=int(config.get("LOCKOUT_LEVEL1_COOLDOWN_SECONDS", 600)) * 1000,
            max_attempts_level2=int(config.get("LOCKOUT_LEVEL2_MAX_ATTEMPTS", 6)),
            cooldown_level2=int(config.get("LOCKOUT_LEVEL2_COOLDOWN_SECONDS", 86400)) * 1000,
            cleanup_interval=int(config.get("LOCKOUT_CLEANUP_INTERVAL_SECONDS", 3600)) * 1000,
        )


class PinLockout:
    """
    In-memory progressive lockout for PIN logins.

    3 failures -> 10 minute block, 6 total failures -> 24 hour block.
    The level-1 block keeps the attempt record so the count keeps growing
    after the block expires; the level-2 block drops it.
    State lives only in this process and is lost on restart.
    """

    def __init__(self, policy: Optional[LockoutPolicy] = None, clock: Callable[[], int] = now_ms):
        self.policy = policy or LockoutPolicy()
        self._clock = clock
        self._attempts: dict[str, AttemptRecord] = {}
        self._blocks: dict[str, BlockRecord] = {}
        self._lock = threading.RLock()

    @staticmethod
    def identify(request, auxiliary: Optional[str] = None) -> str:
        """
        Client key: address + base64 User-Agent prefix (+ base64 phone prefix).
        Heuristic only, spoofed headers get a fresh bucket.
        """
        ip = client_ip(request)
        user_agent = request.headers.get("User-Agent") or "unknown"
        base_id = f"{ip}_{_b64_prefix(user_agent, 20)}"
        if auxiliary:
            return f"{base_id}_{_b64_prefix(auxiliary, 10)}"
        return base_id

    def _block_status(self, client_id: str, now: int) -> dict:
        block = self._blocks.get(client_id)
        if block is None:
            return {"blocked": False}

        time_remaining = block.blocked_until - now
        if time_remaining <= 0:
            # expired, drop it lazily
            del self._blocks[client_id]
            return {"blocked": False}

        return {
            "blocked": True,
            "level": block.level,
            "time_remaining": time_remaining,
            "blocked_until": block.blocked_until,
        }

    def check_blocked(self, client_id: str) -> dict:
        with self._lock:
            return self._block_status(client_id, self._clock())

    def record_failure(self, client_id: str, secret: Optional[str] = None,
                       auxiliary: Optional[str] = None) -> dict:
        """
        Call only after credential verification failed.
        """
        policy = self.policy
        with self._lock:
            now = self._clock()
            record = self._attempts.get(client_id)
            if record is None:
                record = AttemptRecord(count=0, first_attempt=now, last_attempt=now)
                self._attempts[client_id] = record

            if secret:
                record.distinct_secrets.add(secret)
            if auxiliary:
                record.distinct_auxiliary_ids.add(auxiliary)

            record.count += 1
            record.last_attempt = now

            if record.count >= policy.max_attempts_level2:
                self._blocks[client_id] = BlockRecord(
                    level=2,
                    blocked_until=now + policy.cooldown_level2,
                    attempts=record.count,
                    first_violation=record.first_attempt,
                )
                del self._attempts[client_id]
                logger.warning("PIN lockout level 2 for %s... after %d failures",
                               client_id[:20], record.count)
                return {
                    "blocked": True,
                    "level": 2,
                    "cooldown_time": policy.cooldown_level2,
                    "time_remaining": policy.cooldown_level2,
                }

            if record.count >= policy.max_attempts_level1:
                self._blocks[client_id] = BlockRecord(
                    level=1,
                    blocked_until=now + policy.cooldown_level1,
                    attempts=record.count,
                    first_violation=record.first_attempt,
                )
                return {
                    "blocked": True,
                    "level": 1,
                    "cooldown_time": policy.cooldown_level1,
                    "time_remaining": policy.cooldown_level1,
                }

            return {
                "blocked": False,
                "attempts_remaining": policy.max_attempts_level1 - record.count,
                "total_attempts": record.count,
            }

    def record_success(self, client_id: str) -> None:
        with self._lock:
            self._attempts.pop(client_id, None)
            self._blocks.pop(client_id, None)

    def get_status(self, client_id: str) -> dict:
        with self._lock:
            status = self._block_status(client_id, self._clock())
            if status["blocked"]:
                return status

            record = self._attempts.get(client_id)
            if record is None:
                return {
                    "blocked": False,
                    "attempts_remaining": self.policy.max_attempts_level1,
                    "total_attempts": 0,
                }

            return {
                "blocked": False,
                "attempts_remaining": max(self.policy.max_attempts_level1 - record.count, 0),
                "total_attempts": record.count,
                "first_attempt": record.first_attempt,
                "last_attempt": record.last_attempt,
            }

    def security_analysis(self, client_id: str) -> Optional[dict]:
        """
        Pattern summary for logs. Never used to decide a block.
        """
        with self._lock:
            record = self._attempts.get(client_id)
            block = self._blocks.get(client_id)
            if record is None and block is None:
                return None

            unique_secrets = len(record.distinct_secrets) if record else 0
            unique_aux = len(record.distinct_auxiliary_ids) if record else 0
            if record is not None:
                total = record.count
            else:
                total = block.attempts

            return {
                "unique_secrets": unique_secrets,
                "unique_auxiliary_ids": unique_aux,
                "total_attempts": total,
                "time_span": (record.last_attempt - record.first_attempt) if record else None,
                "is_likely_brute_force": unique_secrets > 5 or unique_aux > 3,
                "client_id": client_id[:20] + "...",
            }

    def cleanup(self, now: Optional[int] = None) -> tuple[int, int]:
        """
        Drops attempt records older than 2x the level-2 cooldown and expired blocks.
        Returns (attempts_removed, blocks_removed).
        """
        with self._lock:
            now = self._clock() if now is None else now
            oldest_allowed = now - 2 * self.policy.cooldown_level2

            stale = [cid for cid, rec in self._attempts.items() if rec.first_attempt < oldest_allowed]
            for cid in stale:
                del self._attempts[cid]

            expired = [cid for cid, blk in self._blocks.items() if blk.blocked_until <= now]
            for cid in expired:
                del self._blocks[cid]

        if stale or expired:
            logger.info("PIN lockout cleanup removed %d attempt records and %d blocks",
                        len(stale), len(expired))
        return len(stale), len(expired)

    def stats(self) -> dict:
        with self._lock:
            levels = [b.level for b in self._blocks.values()]
            return {
                "active_attempts": len(self._attempts),
                "blocked_clients": len(self._blocks),
                "level1_blocks": levels.count(1),
                "level2_blocks": levels.count(2),
            }

    def reset(self) -> None:
        with self._lock:
            self._attempts.clear()
            self._blocks.clear()


class CleanupTask:
    """
    Runs limiter.cleanup() every interval on a daemon thread until cancel().
    """

    def __init__(self, limiter: PinLockout, interval_seconds: float):
        self._limiter = limiter
        self._interval = interval_seconds
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> "CleanupTask":
        if self.running:
            return self
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="pin-lockout-cleanup", daemon=True)
        self._thread.start()
        return self

    def _run(self):
        while not self._stop.wait(self._interval):
            self.run_once()

    def run_once(self) -> tuple[int, int]:
        return self._limiter.cleanup()

    def cancel(self, timeout: Optional[float] = 1.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None


def init_lockout(app, clock: Callable[[], int] = now_ms) -> PinLockout:
    """
    Creates the app's limiter and, unless disabled, its cleanup task.
    """
    limiter = PinLockout(LockoutPolicy.from_config(app.config), clock=clock)
    app.extensions["pin_lockout"] = limiter

    if app.config.get("LOCKOUT_CLEANUP_ENABLED", True):
        task = CleanupTask(limiter, limiter.policy.cleanup_interval / 1000)
        app.extensions["pin_lockout_cleanup"] = task.start()
    return limiter


def get_lockout() -> PinLockout:
    return current_app.extensions["pin_lockout"]
