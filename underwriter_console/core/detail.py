"""Detail / decision controller for modal views"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Optional

from underwriter_console.core.list_view import ListViewController
from underwriter_console.domain.decisions import Decision
from underwriter_console.domain.exceptions import ConsoleError, NotFound, Unauthorized, ValidationError
from underwriter_console.domain.models import DetailSnapshot, SubmissionResult, UserProfileBundle, ViewState
from underwriter_console.infrastructure.clients.users import LoanAnalysisClient, UsersClient
from underwriter_console.infrastructure.observability.logging import log_decision
from underwriter_console.infrastructure.observability.metrics import record_decision

logger = logging.getLogger(__name__)

Loader = Callable[[str], Awaitable[Any]]
Submitter = Callable[[Decision], Awaitable[str]]

GENERIC_FAILURE = "Something went wrong. Please try again."


class DetailController:
    """
    Fetches one aggregate record on demand and submits decisions against it.

    Nothing is cached: every open() fetches, close() forgets, and a
    successful decision pulls the record (and the originating list, when
    one is attached) again.
    """

    def __init__(
        self,
        name: str,
        loader: Loader,
        submitter: Optional[Submitter] = None,
        origin: Optional[ListViewController] = None,
        not_found_message: str = "Record not found",
    ):
        self.name = name
        self._loader = loader
        self._submitter = submitter
        self.origin = origin
        self.not_found_message = not_found_message

        self._state = ViewState.IDLE
        self._record_id: Optional[str] = None
        self._record: Any = None
        self._error: Optional[str] = None
        self._form_error: Optional[str] = None
        self._seq = 0

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def record_id(self) -> Optional[str]:
        return self._record_id

    def snapshot(self) -> DetailSnapshot:
        return DetailSnapshot(
            state=self._state,
            record_id=self._record_id,
            record=self._record,
            error=self._error,
            form_error=self._form_error,
        )

    async def open(self, record_id: str) -> DetailSnapshot:
        self._form_error = None
        return await self._load(record_id)

    async def refresh(self) -> DetailSnapshot:
        if self._record_id is None:
            return self.snapshot()
        return await self._load(self._record_id)

    def close(self) -> None:
        # Bumping the sequence drops any fetch still in flight
        self._seq += 1
        self._state = ViewState.IDLE
        self._record_id = None
        self._record = None
        self._error = None
        self._form_error = None

    async def _load(self, record_id: str) -> DetailSnapshot:
        self._seq += 1
        seq = self._seq
        self._record_id = record_id
        self._state = ViewState.LOADING
        self._error = None

        try:
            record = await self._loader(record_id)
        except Unauthorized:
            # The session is gone; nothing to show or retry here
            if seq == self._seq:
                self.close()
            return self.snapshot()
        except NotFound:
            if seq == self._seq:
                self._fail(self.not_found_message)
            return self.snapshot()
        except ConsoleError as e:
            if seq == self._seq:
                self._fail(e.message)
            return self.snapshot()
        except Exception:
            if seq == self._seq:
                logger.exception(f"Unexpected error loading {self.name}", extra={"record_id": record_id})
                self._fail(GENERIC_FAILURE)
            return self.snapshot()

        if seq == self._seq:
            self._record = record
            self._state = ViewState.READY
        return self.snapshot()

    def _fail(self, message: str) -> None:
        self._record = None
        self._error = message
        self._state = ViewState.FAILED

    async def submit(self, decision: Decision) -> SubmissionResult:
        """
        Validate and send a decision.

        Bad input fails locally without a network call. A backend failure
        leaves the form open with ``form_error`` set so it can be resubmitted.
        """
        if self._submitter is None:
            raise RuntimeError(f"{self.name} does not accept decisions")

        kind = decision.kind.value
        start = time.time()

        try:
            decision.payload()
        except ValidationError as e:
            record_decision(kind, "rejected_locally")
            self._form_error = e.message
            return SubmissionResult(ok=False, message=e.message)

        try:
            message = await self._submitter(decision)
        except Unauthorized as e:
            record_decision(kind, "failed")
            log_decision(decision.target_user_id, kind, False, (time.time() - start) * 1000)
            self.close()
            return SubmissionResult(ok=False, message=e.message)
        except ConsoleError as e:
            return self._submission_failed(decision, e.message, start)
        except Exception:
            logger.exception("Unexpected error submitting decision", extra={"user_id": decision.target_user_id})
            return self._submission_failed(decision, GENERIC_FAILURE, start)

        self._form_error = None
        record_decision(kind, "accepted")
        log_decision(decision.target_user_id, kind, True, (time.time() - start) * 1000)

        await self.refresh()
        if self.origin is not None and self.origin.state is not ViewState.IDLE:
            await self.origin.refresh()

        return SubmissionResult(ok=True, message=message)

    def _submission_failed(self, decision: Decision, message: str, start: float) -> SubmissionResult:
        record_decision(decision.kind.value, "failed")
        log_decision(decision.target_user_id, decision.kind.value, False, (time.time() - start) * 1000)
        self._form_error = message
        return SubmissionResult(ok=False, message=message)


def user_profile_loader(users: UsersClient, loan_analysis: LoanAnalysisClient) -> Loader:
    """Loader for the user profile bundle; a user with no loan analysis yet still loads"""

    async def load(user_id: str) -> UserProfileBundle:
        async def analysis() -> Optional[dict]:
            try:
                return await loan_analysis.get_loan_analysis(user_id)
            except NotFound:
                return None

        details, loan_data = await asyncio.gather(users.get_complete_details(user_id), analysis())
        return UserProfileBundle(user_id=user_id, details=details, loan_analysis=loan_data)

    return load
