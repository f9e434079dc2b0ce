# /*
# Copyright 2026 The Kuberang Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# */

"""Retry-until-success primitive used by every cluster probe."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TypeVar

from tenacity import Retrying, retry_if_result, stop_after_attempt, wait_fixed

from kuberang import logger

T = TypeVar("T")


def retry_until(
    max_attempts: int,
    probe: Callable[[], T],
    succeeded: Callable[[T], bool] = bool,
    wait_seconds: float = 0,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call *probe* until *succeeded* accepts its result or attempts run out.

    Exceptions raised by *probe* are not retried; they propagate.

    Args:
        max_attempts: Maximum number of calls to *probe*.
        probe: Zero-argument callable performing one attempt.
        succeeded: Predicate deciding whether a result counts as success.
        wait_seconds: Fixed delay between attempts.
        sleep: Sleep function used between attempts.

    Returns:
        The first successful result, or the last result if none succeeded.

    Raises:
        ValueError: If *max_attempts* is less than 1.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

    def _log_retry(retry_state) -> None:
        logger.debug("Attempt %d/%d did not succeed, retrying",
                     retry_state.attempt_number, max_attempts)

    retryer = Retrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_fixed(wait_seconds),
        retry=retry_if_result(lambda result: not succeeded(result)),
        retry_error_callback=lambda retry_state: retry_state.outcome.result(),
        before_sleep=_log_retry,
        sleep=sleep,
        reraise=True,
    )
    return retryer(probe)


def retry(max_attempts: int, probe: Callable[[], bool]) -> bool:
    """Call *probe* up to *max_attempts* times, stopping at the first True."""
    return bool(retry_until(max_attempts, probe))
