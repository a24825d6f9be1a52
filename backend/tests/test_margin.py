"""마진 계산 테스트 (카탈로그 부품 / 지점 부품)"""

from decimal import Decimal

from app.models.branch_part import recompute_branch_margin
from app.models.part import compute_margin

from factories import create_part


class TestComputeMargin:
    """(판매가 - 원가) / 원가 * 100"""

    def test_basic_margin(self):
        assert compute_margin(Decimal("100"), Decimal("150")) == Decimal("50.00")

    def test_rounds_to_two_places(self):
        assert compute_margin(Decimal("3"), Decimal("4")) == Decimal("33.33")

    def test_negative_margin(self):
        assert compute_margin(100, 80) == Decimal("-20.00")

    def test_zero_cost_keeps_existing(self):
        assert compute_margin(0, 150) is None

    def test_missing_value(self):
        assert compute_margin(None, 150) is None


class TestBranchMargin:
    """branch_cost/branch_price 변경 시에만 branch_margin 재계산"""

    def test_both_values_given(self):
        values = {"branch_cost": Decimal("100"), "branch_price": Decimal("130")}
        recompute_branch_margin(values)
        assert values["branch_margin"] == Decimal("30.00")

    def test_price_only_uses_current_cost(self):
        values = {"branch_price": Decimal("200")}
        recompute_branch_margin(values, {"branch_cost": Decimal("100"), "branch_price": Decimal("150")})
        assert values["branch_margin"] == Decimal("100.00")

    def test_zero_cost_leaves_margin(self):
        values = {"branch_price": Decimal("200")}
        recompute_branch_margin(values, {"branch_cost": Decimal("0")})
        assert "branch_margin" not in values

    def test_unrelated_fields_untouched(self):
        values = {"branch_stock": 4, "branch_margin": Decimal("12")}
        recompute_branch_margin(values, {"branch_cost": Decimal("100"), "branch_price": Decimal("150")})
        assert values == {"branch_stock": 4, "branch_margin": Decimal("12")}


class TestPartMarginEvent:
    """Part 저장 시 마진 자동 계산"""

    async def test_margin_on_insert(self, db):
        part = await create_part(db, cost_amount=Decimal("100"), price_amount=Decimal("125"))
        assert part.margin == Decimal("25.00")

    async def test_margin_on_price_update(self, db):
        part = await create_part(db, cost_amount=Decimal("100"), price_amount=Decimal("125"))
        part.price_amount = Decimal("150")
        await db.commit()
        await db.refresh(part)
        assert part.margin == Decimal("50")

    async def test_zero_cost_keeps_default(self, db):
        part = await create_part(db, cost_amount=Decimal("0"), price_amount=Decimal("90"))
        await db.refresh(part)
        assert part.margin == Decimal("20")

    async def test_unrelated_update_keeps_margin(self, db):
        part = await create_part(db, cost_amount=Decimal("100"), price_amount=Decimal("125"), margin=Decimal("25"))
        part.margin = Decimal("99")
        part.stock = 3
        await db.commit()
        await db.refresh(part)
        assert part.margin == Decimal("99")
