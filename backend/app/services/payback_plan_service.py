"""Payback plan service for scheduling and payback generation."""

import logging
from datetime import date
from functools import lru_cache
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.enums import PaybackPlanStatus, PaybackStatus
from app.models.domain.payback import Payback, PaybackPlan
from app.models.schemas.payback_plan import (
    PaybackPlanCreate,
    PaybackPlanResponse,
    PaybackPlanUpdate,
    PaybackScheduleRequest,
    PaybackScheduleResponse,
    ScheduledPaybackResponse,
    check_paydays,
)
from app.repositories.funding_repository import FundingRepository
from app.repositories.payback_repository import PaybackPlanRepository
from app.services.payback_allocation import allocate_payback
from app.services.schedule import (
    HolidayCalendar,
    PaybackScheduleEngine,
    PaybackTerms,
    total_of,
)
from app.services.statistics import StatisticsEngine

logger = logging.getLogger(__name__)

SYSTEM_GENERATED_NOTE = "System generated"
HALTED_STATUSES = (PaybackPlanStatus.PAUSED, PaybackPlanStatus.STOPPED)
SCHEDULE_FIELDS = {"frequency", "payday_list", "avoid_holiday", "start_date"}


@lru_cache(maxsize=1)
def default_schedule_engine() -> PaybackScheduleEngine:
    """Schedule engine over the configured holiday calendar window, shared per process."""
    calendar = HolidayCalendar(
        start_year=settings.HOLIDAY_CALENDAR_START_YEAR,
        end_year=settings.HOLIDAY_CALENDAR_END_YEAR,
    )
    return PaybackScheduleEngine(calendar)


class PaybackPlanService:
    """
    Payback plan service for managing plans and generating due paybacks.

    Provides plan CRUD with schedule bookkeeping (next payback date),
    payback list previews for unsaved terms, and the generation of
    SUBMITTED paybacks as plans come due.
    """

    def __init__(
        self,
        db: AsyncSession,
        schedule_engine: Optional[PaybackScheduleEngine] = None,
    ):
        """
        Initialize the payback plan service.

        Args:
            db: Async database session
            schedule_engine: Schedule engine; the process-wide default if omitted
        """
        self.db = db
        self.repo = PaybackPlanRepository(db)
        self.funding_repo = FundingRepository(db)
        self.schedule_engine = schedule_engine or default_schedule_engine()
        self.statistics = StatisticsEngine(db, self.schedule_engine)

    # ===== Plan CRUD Operations =====

    async def create_plan(self, data: Dict[str, Any]) -> PaybackPlan:
        """
        Create a payback plan on a funding.

        The plan inherits merchant, funder and lender from the funding and
        starts ACTIVE with its first scheduled date on or after start_date.

        Args:
            data: Plan fields (see PaybackPlanCreate)

        Returns:
            Created payback plan

        Raises:
            ValueError: If validation fails or the funding does not exist
        """
        payload = PaybackPlanCreate.model_validate(data)

        funding = await self.funding_repo.get_by_id(payload.funding_id)
        if not funding:
            raise ValueError(f"Funding {payload.funding_id} not found")

        terms = PaybackTerms(
            frequency=payload.frequency,
            payday_list=payload.payday_list,
            avoid_holiday=payload.avoid_holiday,
            start_date=payload.start_date,
        )
        next_payback_date = self.schedule_engine.nth_payback_date(
            terms, payload.start_date, 1
        )

        plan = PaybackPlan(
            **payload.model_dump(),
            merchant_id=funding.merchant_id,
            funder_id=funding.funder_id,
            lender_id=funding.lender_id,
            next_payback_date=next_payback_date,
            status=PaybackPlanStatus.ACTIVE,
        )

        self.db.add(plan)
        await self.db.commit()
        await self.db.refresh(plan)

        logger.info(
            f"Created payback plan {plan.id} for funding {funding.id}: "
            f"{plan.payback_count} x {plan.frequency.value}, first payback {next_payback_date}"
        )
        return plan

    async def get_plan(
        self, plan_id: UUID, calculate: bool = False
    ) -> Optional[PaybackPlanResponse]:
        """
        Retrieve a payback plan by ID.

        Args:
            plan_id: UUID of the payback plan
            calculate: Include the plan's statistics

        Returns:
            Payback plan response, or None if not found
        """
        plan = await self.repo.get_by_id(plan_id)
        if not plan:
            return None

        responses = await self._to_responses([plan], calculate)
        return responses[0]

    async def list_plans(
        self, funding_id: UUID, calculate: bool = False
    ) -> List[PaybackPlanResponse]:
        """
        Retrieve all payback plans of a funding.

        Args:
            funding_id: UUID of the funding
            calculate: Include each plan's statistics

        Returns:
            List of payback plan responses in start date order
        """
        plans = await self.repo.get_by_funding(funding_id)
        return await self._to_responses(plans, calculate)

    async def update_plan(
        self, plan_id: UUID, data: Dict[str, Any]
    ) -> Optional[PaybackPlan]:
        """
        Update a payback plan.

        Pausing or stopping a plan clears its next payback date; resuming a
        plan without one schedules it again from today or its start date,
        whichever is later. Changing the schedule terms of an ACTIVE plan
        moves its next payback date to the first new payday on or after the
        current one (or the new start date, if later).

        Args:
            plan_id: UUID of the payback plan
            data: Fields to update (see PaybackPlanUpdate)

        Returns:
            Updated payback plan, or None if not found

        Raises:
            ValueError: If validation fails
        """
        payload = PaybackPlanUpdate.model_validate(data)
        changes = payload.model_dump(exclude_unset=True)

        plan = await self.repo.get_by_id(plan_id)
        if not plan:
            return None

        if "frequency" in changes or "payday_list" in changes:
            check_paydays(
                changes.get("frequency", plan.frequency),
                changes.get("payday_list", plan.payday_list),
            )

        status = changes.get("status")
        if status in HALTED_STATUSES:
            changes["next_payback_date"] = None

        for field, value in changes.items():
            setattr(plan, field, value)

        if plan.status == PaybackPlanStatus.ACTIVE and "next_payback_date" not in changes:
            if status == PaybackPlanStatus.ACTIVE and plan.next_payback_date is None:
                resume_from = max(plan.start_date, date.today())
                plan.next_payback_date = self.schedule_engine.nth_payback_date(
                    PaybackTerms.from_plan(plan), resume_from, 1
                )
            elif plan.next_payback_date is not None and SCHEDULE_FIELDS & changes.keys():
                # Never move back before the date already reached
                reschedule_from = max(plan.start_date, plan.next_payback_date)
                plan.next_payback_date = self.schedule_engine.nth_payback_date(
                    PaybackTerms.from_plan(plan), reschedule_from, 1
                )

        await self.db.commit()
        await self.db.refresh(plan)

        logger.info(f"Updated payback plan {plan.id}: {sorted(changes)}")
        return plan

    # ===== Schedule =====

    def preview_schedule(self, data: Dict[str, Any]) -> PaybackScheduleResponse:
        """
        Generate the payback list of unsaved plan terms.

        Args:
            data: Plan terms (see PaybackScheduleRequest)

        Returns:
            Previewed paybacks with term length and end date

        Raises:
            ValueError: If validation fails
        """
        request = PaybackScheduleRequest.model_validate(data)
        terms = PaybackTerms(**request.model_dump())

        paybacks = self.schedule_engine.generate_payback_list(terms)
        return PaybackScheduleResponse(
            paybacks=[ScheduledPaybackResponse.model_validate(p) for p in paybacks],
            total_amount=total_of(paybacks),
            payback_count=len(paybacks),
            term_length=self.schedule_engine.term_length(terms),
            scheduled_end_date=self.schedule_engine.scheduled_end_date(terms),
        )

    async def generate_due_paybacks(
        self, plan_id: UUID, as_of: Optional[date] = None
    ) -> List[Payback]:
        """
        Generate the paybacks an ACTIVE plan owes up to a date.

        One SUBMITTED payback is created per due date on or before ``as_of``,
        for the plan's next payback amount, split between funded and fee
        portions by the plan's distribution priority against the funding's
        live balances. The plan then advances to its next scheduled date;
        the last payback stops the plan.

        Args:
            plan_id: UUID of the payback plan
            as_of: Cut-off date, today if omitted

        Returns:
            Created paybacks in due date order

        Raises:
            ValueError: If the plan does not exist, is not ACTIVE or has no
                next payback date
        """
        as_of = as_of or date.today()

        plan = await self.repo.get_by_id(plan_id)
        if not plan:
            raise ValueError(f"Payback plan {plan_id} not found")
        if plan.status != PaybackPlanStatus.ACTIVE or plan.next_payback_date is None:
            raise ValueError("Payback plan is not active or next payback date is not set")

        funding = await self.funding_repo.get_by_id(plan.funding_id)
        if not funding:
            raise ValueError(f"Funding {plan.funding_id} not found")

        paybacks: List[Payback] = []
        while plan.next_payback_date is not None and plan.next_payback_date <= as_of:
            plan_stats = (await self.statistics.payback_plans([plan]))[plan.id]
            amount = plan_stats.next_payback_amount
            if amount <= 0:
                logger.warning(
                    f"Payback plan {plan.id} has nothing left to collect, stopping it"
                )
                self._stop(plan, as_of)
                break

            funding_stats = (await self.statistics.fundings([funding]))[funding.id]
            funded_amount, fee_amount = allocate_payback(
                amount,
                plan.distribution_priority,
                remaining_payback_amount=funding_stats.remaining_payback_amount,
                remaining_fee_amount=funding_stats.remaining_fee_amount,
                funding_payback_amount=funding.payback_amount,
                residual_fee_amount=funding_stats.residual_fee_amount,
            )

            payback = Payback(
                funding_id=plan.funding_id,
                payback_plan_id=plan.id,
                merchant_id=plan.merchant_id,
                funder_id=plan.funder_id,
                due_date=plan.next_payback_date,
                submitted_date=as_of,
                payback_amount=amount,
                funded_amount=funded_amount,
                fee_amount=fee_amount,
                payment_method=plan.payment_method,
                status=PaybackStatus.SUBMITTED,
                note=SYSTEM_GENERATED_NOTE,
                reconciled=False,
            )
            self.db.add(payback)
            paybacks.append(payback)

            if plan_stats.remaining_count <= 1:
                self._stop(plan, as_of)
            else:
                plan.next_payback_date = self.schedule_engine.scheduled_payback_date(
                    PaybackTerms.from_plan(plan), plan.next_payback_date, 2
                )
            await self.db.flush()

        await self.db.commit()

        logger.info(f"Generated {len(paybacks)} paybacks for plan {plan.id} as of {as_of}")
        return paybacks

    async def generate_all_due_paybacks(self, as_of: Optional[date] = None) -> Dict[UUID, int]:
        """
        Generate due paybacks for every ACTIVE plan that is due.

        Due plans are looked up in pages of PAYBACK_BATCH_SIZE and each plan
        is committed on its own.

        A plan that fails is rolled back and reported with -1; the batch
        carries on with the next plan.

        Args:
            as_of: Cut-off date, today if omitted

        Returns:
            Number of paybacks generated per plan ID
        """
        as_of = as_of or date.today()
        batch_size = settings.PAYBACK_BATCH_SIZE

        # Collect IDs first; generating paybacks moves plans out of the due set
        plan_ids: List[UUID] = []
        while True:
            batch = await self.repo.get_due_plans(as_of, skip=len(plan_ids), limit=batch_size)
            plan_ids.extend(plan.id for plan in batch)
            if len(batch) < batch_size:
                break

        results: Dict[UUID, int] = {}
        for plan_id in plan_ids:
            try:
                results[plan_id] = len(await self.generate_due_paybacks(plan_id, as_of))
            except Exception:
                await self.db.rollback()
                logger.error(f"Failed to generate paybacks for plan {plan_id}", exc_info=True)
                results[plan_id] = -1

        logger.info(f"Processed {len(results)} due payback plans as of {as_of}")
        return results

    # ===== Helpers =====

    @staticmethod
    def _stop(plan: PaybackPlan, as_of: date):
        plan.status = PaybackPlanStatus.STOPPED
        plan.end_date = as_of
        plan.next_payback_date = None

    async def _to_responses(
        self, plans: List[PaybackPlan], calculate: bool
    ) -> List[PaybackPlanResponse]:
        statistics = await self.statistics.payback_plans(plans) if calculate else {}
        responses = []
        for plan in plans:
            response = PaybackPlanResponse.model_validate(plan)
            if plan.id in statistics:
                response.statistics = statistics[plan.id].to_dict()
            responses.append(response)
        return responses
