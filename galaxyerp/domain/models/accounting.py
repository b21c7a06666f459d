"""会计模型：科目、会计分录、收付款。"""

from __future__ import annotations

from datetime import date

from sqlalchemy import Date, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from galaxyerp.core.models import Model

ACCOUNT_TYPES = ("asset", "liability", "equity", "revenue", "expense")

Money = Numeric(18, 2, asdecimal=False)


class Account(Model):
    """会计科目。"""

    __tablename__ = "accounts"

    code: Mapped[str] = mapped_column(String(50), unique=True, index=True, comment="科目编码")
    name: Mapped[str] = mapped_column(String(100), comment="科目名称")
    description: Mapped[str | None] = mapped_column(Text, nullable=True, comment="描述")
    account_type: Mapped[str] = mapped_column(String(20), index=True, comment="科目类型")
    parent_id: Mapped[int | None] = mapped_column(
        ForeignKey("accounts.id"), nullable=True, index=True, comment="父科目ID"
    )
    balance: Mapped[float] = mapped_column(Money, default=0, comment="余额")
    currency: Mapped[str] = mapped_column(String(10), default="CNY", comment="币种")
    status: Mapped[str] = mapped_column(String(20), default="active", comment="状态")


class JournalEntry(Model):
    """会计分录（凭证头）。"""

    __tablename__ = "journal_entries"

    number: Mapped[str | None] = mapped_column(String(50), unique=True, nullable=True, comment="分录编号")
    entry_date: Mapped[date] = mapped_column(Date, index=True, comment="分录日期")
    reference: Mapped[str | None] = mapped_column(String(100), nullable=True, comment="参考号")
    description: Mapped[str] = mapped_column(String(500), comment="摘要")
    total_debit: Mapped[float] = mapped_column(Money, default=0, comment="借方合计")
    total_credit: Mapped[float] = mapped_column(Money, default=0, comment="贷方合计")
    status: Mapped[str] = mapped_column(String(20), default="posted", comment="状态")
    created_by: Mapped[int | None] = mapped_column(Integer, nullable=True, comment="创建人")

    lines: Mapped[list[JournalEntryLine]] = relationship(
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="JournalEntryLine.id",
        lazy="selectin",
    )


class JournalEntryLine(Model):
    """会计分录明细行。"""

    __tablename__ = "journal_entry_lines"

    entry_id: Mapped[int] = mapped_column(ForeignKey("journal_entries.id"), index=True, comment="分录ID")
    account_id: Mapped[int] = mapped_column(ForeignKey("accounts.id"), index=True, comment="科目ID")
    debit_amount: Mapped[float] = mapped_column(Money, default=0, comment="借方金额")
    credit_amount: Mapped[float] = mapped_column(Money, default=0, comment="贷方金额")
    description: Mapped[str | None] = mapped_column(String(500), nullable=True, comment="摘要")

    entry: Mapped[JournalEntry] = relationship(back_populates="lines")
    account: Mapped[Account] = relationship(lazy="selectin")


class Payment(Model):
    """收付款记录。"""

    __tablename__ = "payments"

    number: Mapped[str | None] = mapped_column(String(50), unique=True, nullable=True, comment="单据编号")
    payment_type: Mapped[str] = mapped_column(String(20), comment="类型 payment/receipt")
    amount: Mapped[float] = mapped_column(Money, comment="金额")
    payment_date: Mapped[date] = mapped_column(Date, index=True, comment="日期")
    reference: Mapped[str | None] = mapped_column(String(100), nullable=True, comment="参考号")
    description: Mapped[str | None] = mapped_column(String(500), nullable=True, comment="摘要")
    account_id: Mapped[int] = mapped_column(ForeignKey("accounts.id"), index=True, comment="科目ID")
    customer_id: Mapped[int | None] = mapped_column(Integer, nullable=True, comment="客户ID")
    supplier_id: Mapped[int | None] = mapped_column(Integer, nullable=True, comment="供应商ID")
    payment_method: Mapped[str] = mapped_column(String(20), comment="支付方式")
    status: Mapped[str] = mapped_column(String(20), default="pending", comment="状态")


__all__ = [
    "ACCOUNT_TYPES",
    "Account",
    "JournalEntry",
    "JournalEntryLine",
    "Payment",
]
