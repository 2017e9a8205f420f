"""
Integration tests for the payback plan service.
"""
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.enums import (
    DistributionPriority,
    PaybackPlanStatus,
    PaybackStatus,
)
from app.models.domain import Funding, FundingFee, Payback, PaybackPlan
from app.repositories import PaybackRepository
from app.services.payback_plan_service import PaybackPlanService
from app.services.schedule import PaybackScheduleEngine


@pytest.fixture
def service(db: AsyncSession, schedule_engine: PaybackScheduleEngine) -> PaybackPlanService:
    return PaybackPlanService(db, schedule_engine)


@pytest.fixture
def create_data(funding: Funding, plan_data: dict[str, Any]) -> dict[str, Any]:
    return {**plan_data, "funding_id": funding.id}


class TestCreatePlan:
    """Test suite for creating payback plans."""

    @pytest.mark.asyncio
    async def test_create_plan(
        self, service: PaybackPlanService, funding: Funding, create_data: dict[str, Any]
    ) -> None:
        """A new plan is ACTIVE, inherits parties and knows its first date."""
        plan = await service.create_plan(create_data)

        assert plan.status == PaybackPlanStatus.ACTIVE
        assert plan.next_payback_date == date(2024, 6, 17)
        assert plan.payday_list == [1, 2, 3, 4, 5]
        assert plan.merchant_id == funding.merchant_id
        assert plan.funder_id == funding.funder_id
        assert plan.lender_id == funding.lender_id
        assert plan.distribution_priority == DistributionPriority.FUND

    @pytest.mark.asyncio
    async def test_first_date_skips_holiday(
        self, service: PaybackPlanService, create_data: dict[str, Any]
    ) -> None:
        """A plan starting on Juneteenth first debits the next day."""
        plan = await service.create_plan({**create_data, "start_date": date(2024, 6, 19)})

        assert plan.next_payback_date == date(2024, 6, 20)

    @pytest.mark.asyncio
    async def test_missing_funding(
        self, service: PaybackPlanService, plan_data: dict[str, Any]
    ) -> None:
        """A plan needs an existing funding."""
        with pytest.raises(ValueError, match="not found"):
            await service.create_plan(
                {**plan_data, "funding_id": uuid4()}
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides",
        [
            {"frequency": "MONTHLY", "payday_list": [1, 15]},
            {"frequency": "MONTHLY", "payday_list": [32]},
            {"frequency": "WEEKLY", "payday_list": [1, 3]},
            {"payday_list": [1, 7]},
            {"payday_list": [1, 1]},
            {"payback_count": 0},
            {"total_amount": "-5"},
        ],
    )
    async def test_invalid_terms(
        self,
        service: PaybackPlanService,
        create_data: dict[str, Any],
        overrides: dict[str, Any],
    ) -> None:
        """Terms that cannot be scheduled are rejected."""
        with pytest.raises(ValueError):
            await service.create_plan({**create_data, **overrides})


class TestReadPlans:
    """Test suite for reading payback plans."""

    @pytest.mark.asyncio
    async def test_get_plan_with_statistics(
        self, service: PaybackPlanService, create_data: dict[str, Any]
    ) -> None:
        """Statistics are attached on request."""
        plan = await service.create_plan(create_data)

        plain = await service.get_plan(plan.id)
        detailed = await service.get_plan(plan.id, calculate=True)

        assert plain.statistics is None
        assert detailed.statistics["remaining_count"] == 10
        assert detailed.statistics["next_payback_amount"] == Decimal("100.00")
        assert detailed.statistics["scheduled_end_date"] == date(2024, 7, 1)

    @pytest.mark.asyncio
    async def test_get_missing_plan(self, service: PaybackPlanService) -> None:
        """A missing plan gives None."""
        assert await service.get_plan(uuid4()) is None

    @pytest.mark.asyncio
    async def test_list_plans(
        self, service: PaybackPlanService, funding: Funding, create_data: dict[str, Any]
    ) -> None:
        """Plans of a funding are listed in start date order."""
        later = await service.create_plan({**create_data, "start_date": date(2024, 7, 1)})
        earlier = await service.create_plan(create_data)

        plans = await service.list_plans(funding.id)

        assert [plan.id for plan in plans] == [earlier.id, later.id]


class TestUpdatePlan:
    """Test suite for updating payback plans."""

    @pytest.mark.asyncio
    async def test_pause_clears_next_date(
        self, service: PaybackPlanService, create_data: dict[str, Any]
    ) -> None:
        """Pausing a plan takes it off the schedule."""
        plan = await service.create_plan(create_data)

        updated = await service.update_plan(plan.id, {"status": "PAUSED"})

        assert updated.status == PaybackPlanStatus.PAUSED
        assert updated.next_payback_date is None

    @pytest.mark.asyncio
    async def test_resume_reschedules(
        self, service: PaybackPlanService, create_data: dict[str, Any]
    ) -> None:
        """Resuming a paused plan schedules it from today onwards."""
        plan = await service.create_plan(create_data)
        await service.update_plan(plan.id, {"status": "PAUSED"})

        resumed = await service.update_plan(plan.id, {"status": "ACTIVE"})

        assert resumed.status == PaybackPlanStatus.ACTIVE
        assert resumed.next_payback_date >= date.today()
        assert resumed.next_payback_date.weekday() < 5

    @pytest.mark.asyncio
    async def test_invalid_paydays_for_stored_frequency(
        self, service: PaybackPlanService, create_data: dict[str, Any]
    ) -> None:
        """New paydays are checked against the stored frequency."""
        plan = await service.create_plan({**create_data, "frequency": "MONTHLY", "payday_list": [15]})

        with pytest.raises(ValueError, match="MONTHLY"):
            await service.update_plan(plan.id, {"payday_list": [1, 15]})

    @pytest.mark.asyncio
    async def test_new_paydays_move_next_date(
        self, service: PaybackPlanService, create_data: dict[str, Any]
    ) -> None:
        """Changing paydays moves the next payback onto the new schedule."""
        plan = await service.create_plan(create_data)
        assert plan.next_payback_date == date(2024, 6, 17)

        updated = await service.update_plan(plan.id, {"payday_list": [4]})

        assert updated.payday_list == [4]
        assert updated.next_payback_date == date(2024, 6, 20)

    @pytest.mark.asyncio
    async def test_later_start_moves_next_date(
        self, service: PaybackPlanService, create_data: dict[str, Any]
    ) -> None:
        """A later start date pushes the next payback out to it."""
        plan = await service.create_plan(create_data)

        updated = await service.update_plan(plan.id, {"start_date": "2024-07-01"})

        assert updated.next_payback_date == date(2024, 7, 1)

    @pytest.mark.asyncio
    async def test_note_keeps_next_date(
        self, service: PaybackPlanService, create_data: dict[str, Any]
    ) -> None:
        """Updates outside the schedule terms leave the next payback alone."""
        plan = await service.create_plan(create_data)

        updated = await service.update_plan(plan.id, {"note": "call first"})

        assert updated.next_payback_date == date(2024, 6, 17)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "field", ["start_date", "total_amount", "status", "frequency", "payday_list"]
    )
    async def test_required_field_cannot_be_cleared(
        self,
        db: AsyncSession,
        service: PaybackPlanService,
        create_data: dict[str, Any],
        field: str,
    ) -> None:
        """Explicit nulls for required fields are rejected before any write."""
        plan = await service.create_plan(create_data)

        with pytest.raises(ValueError, match="cannot be null"):
            await service.update_plan(plan.id, {field: None})

        await db.refresh(plan)
        assert plan.start_date == date(2024, 6, 17)
        assert plan.total_amount == Decimal("1000.00")
        assert plan.status == PaybackPlanStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_update_missing_plan(self, service: PaybackPlanService) -> None:
        """Updating a missing plan gives None."""
        assert await service.update_plan(uuid4(), {"note": "x"}) is None


class TestPreviewSchedule:
    """Test suite for previewing payback lists."""

    def test_preview(self, service: PaybackPlanService, plan_data: dict[str, Any]) -> None:
        """Previews list paybacks with totals and plan length."""
        preview = service.preview_schedule(plan_data)

        assert preview.payback_count == 10
        assert preview.total_amount == Decimal("1000.00")
        assert preview.paybacks[2].date == date(2024, 6, 20)
        assert preview.term_length == Decimal("0.5")
        assert preview.scheduled_end_date == date(2024, 7, 1)

    def test_preview_invalid_terms(self, service: PaybackPlanService, plan_data: dict[str, Any]) -> None:
        """Invalid preview terms are rejected."""
        with pytest.raises(ValueError):
            service.preview_schedule({**plan_data, "payday_list": []})


class TestGenerateDuePaybacks:
    """Test suite for payback generation."""

    @pytest.mark.asyncio
    async def test_generates_up_to_date(
        self, service: PaybackPlanService, create_data: dict[str, Any]
    ) -> None:
        """One SUBMITTED payback per due date; the plan moves to its next date."""
        plan = await service.create_plan(create_data)

        paybacks = await service.generate_due_paybacks(plan.id, as_of=date(2024, 6, 21))

        assert [p.due_date for p in paybacks] == [
            date(2024, 6, 17),
            date(2024, 6, 18),
            date(2024, 6, 20),
            date(2024, 6, 21),
        ]
        assert all(p.status == PaybackStatus.SUBMITTED for p in paybacks)
        assert all(p.payback_amount == Decimal("100.00") for p in paybacks)
        assert all(p.submitted_date == date(2024, 6, 21) for p in paybacks)

        stored = await service.repo.get_by_id(plan.id)
        assert stored.next_payback_date == date(2024, 6, 24)
        assert stored.status == PaybackPlanStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_runs_plan_to_completion(
        self, service: PaybackPlanService, db: AsyncSession, create_data: dict[str, Any]
    ) -> None:
        """The last payback stops the plan and the amounts add up to its total."""
        plan = await service.create_plan(create_data)

        paybacks = await service.generate_due_paybacks(plan.id, as_of=date(2024, 12, 31))

        assert len(paybacks) == 10
        assert paybacks[-1].due_date == date(2024, 7, 1)
        assert sum(p.payback_amount for p in paybacks) == Decimal("1000.00")

        stored = await service.repo.get_by_id(plan.id)
        assert stored.status == PaybackPlanStatus.STOPPED
        assert stored.end_date == date(2024, 12, 31)
        assert stored.next_payback_date is None
        assert len(await PaybackRepository(db).get_by_plan(plan.id)) == 10

    @pytest.mark.asyncio
    async def test_spreads_rounding(
        self, service: PaybackPlanService, create_data: dict[str, Any]
    ) -> None:
        """Uneven totals spread the odd cent while still adding up."""
        plan = await service.create_plan(
            {**create_data, "total_amount": Decimal("100.00"), "payback_count": 3}
        )

        paybacks = await service.generate_due_paybacks(plan.id, as_of=date(2024, 6, 30))

        assert [p.payback_amount for p in paybacks] == [
            Decimal("33.33"),
            Decimal("33.34"),
            Decimal("33.33"),
        ]

    @pytest.mark.asyncio
    async def test_fund_priority_split(
        self, service: PaybackPlanService, create_data: dict[str, Any]
    ) -> None:
        """With nothing disbursed and no fee, FUND sends everything to the funded balance."""
        plan = await service.create_plan(create_data)

        paybacks = await service.generate_due_paybacks(plan.id, as_of=date(2024, 6, 17))

        assert (paybacks[0].funded_amount, paybacks[0].fee_amount) == (Decimal("100.00"), Decimal("0.00"))

    @pytest.mark.asyncio
    async def test_both_priority_split(
        self,
        service: PaybackPlanService,
        db: AsyncSession,
        funding: Funding,
        create_data: dict[str, Any],
    ) -> None:
        """BOTH splits pro rata between payback amount and residual fees."""
        db.add(FundingFee(funding_id=funding.id, amount=Decimal("1000"), upfront=False))
        await db.commit()
        plan = await service.create_plan({**create_data, "distribution_priority": "BOTH"})

        paybacks = await service.generate_due_paybacks(plan.id, as_of=date(2024, 6, 17))

        assert paybacks[0].funded_amount == Decimal("93.33")
        assert paybacks[0].fee_amount == Decimal("6.67")

    @pytest.mark.asyncio
    async def test_nothing_left_stops_plan(
        self,
        service: PaybackPlanService,
        db: AsyncSession,
        funding: Funding,
        create_data: dict[str, Any],
    ) -> None:
        """A plan whose total is already collected is stopped without new paybacks."""
        plan = await service.create_plan(create_data)
        db.add(
            Payback(
                funding_id=funding.id,
                payback_plan_id=plan.id,
                merchant_id=funding.merchant_id,
                funder_id=funding.funder_id,
                due_date=date(2024, 6, 14),
                payback_amount=Decimal("1000.00"),
                status=PaybackStatus.SUCCEED,
            )
        )
        await db.commit()

        paybacks = await service.generate_due_paybacks(plan.id, as_of=date(2024, 6, 21))

        assert paybacks == []
        stored = await service.repo.get_by_id(plan.id)
        assert stored.status == PaybackPlanStatus.STOPPED

    @pytest.mark.asyncio
    async def test_inactive_plan_rejected(
        self, service: PaybackPlanService, create_data: dict[str, Any]
    ) -> None:
        """Paused plans do not generate paybacks."""
        plan = await service.create_plan(create_data)
        await service.update_plan(plan.id, {"status": "PAUSED"})

        with pytest.raises(ValueError, match="not active"):
            await service.generate_due_paybacks(plan.id, as_of=date(2024, 6, 21))

    @pytest.mark.asyncio
    async def test_missing_plan_rejected(self, service: PaybackPlanService) -> None:
        """Generating for a missing plan raises."""
        with pytest.raises(ValueError, match="not found"):
            await service.generate_due_paybacks(uuid4())


class TestGenerateAllDuePaybacks:
    """Test suite for the batch payback run."""

    @pytest.mark.asyncio
    async def test_every_due_plan_processed(
        self,
        service: PaybackPlanService,
        create_data: dict[str, Any],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Due plans are found page by page and each one is processed."""
        monkeypatch.setattr(settings, "PAYBACK_BATCH_SIZE", 1)
        first = await service.create_plan(create_data)
        second = await service.create_plan({**create_data, "start_date": date(2024, 6, 20)})
        future = await service.create_plan({**create_data, "start_date": date(2024, 9, 2)})

        results = await service.generate_all_due_paybacks(as_of=date(2024, 6, 21))

        assert results == {first.id: 4, second.id: 2}
        assert future.id not in results

    @pytest.mark.asyncio
    async def test_failed_plan_reported(
        self,
        service: PaybackPlanService,
        db: AsyncSession,
        funding: Funding,
        create_data: dict[str, Any],
    ) -> None:
        """A failing plan is reported with -1 and the others still run."""
        healthy = await service.create_plan(create_data)
        healthy_id = healthy.id
        # SQLite does not enforce the foreign key, so the plan can outlive its funding
        orphan = PaybackPlan(
            funding_id=uuid4(),
            merchant_id=funding.merchant_id,
            funder_id=funding.funder_id,
            frequency=healthy.frequency,
            payday_list=[1, 2, 3, 4, 5],
            start_date=date(2024, 6, 17),
            total_amount=Decimal("500"),
            payback_count=5,
            next_payback_date=date(2024, 6, 17),
        )
        db.add(orphan)
        await db.commit()
        orphan_id = orphan.id

        results = await service.generate_all_due_paybacks(as_of=date(2024, 6, 18))

        assert results[orphan_id] == -1
        assert results[healthy_id] == 2
