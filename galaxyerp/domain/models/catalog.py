"""主数据模型：物料、仓库、客户、供应商、产品、员工、项目、部门。"""

from __future__ import annotations

from datetime import date

from sqlalchemy import Boolean, Date, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from galaxyerp.core.models import Model

Money = Numeric(18, 2, asdecimal=False)
Quantity = Numeric(18, 4, asdecimal=False)


# ==================== 库存 ====================


class Item(Model):
    """物料。"""

    __tablename__ = "items"

    code: Mapped[str] = mapped_column(String(50), unique=True, index=True, comment="物料编码")
    name: Mapped[str] = mapped_column(String(100), index=True, comment="物料名称")
    description: Mapped[str | None] = mapped_column(Text, nullable=True, comment="描述")
    item_type: Mapped[str] = mapped_column(String(20), comment="物料类型")
    unit: Mapped[str] = mapped_column(String(20), default="pcs", comment="单位")
    min_stock: Mapped[float] = mapped_column(Quantity, default=0, comment="最低库存")
    max_stock: Mapped[float] = mapped_column(Quantity, default=0, comment="最高库存")
    unit_cost: Mapped[float] = mapped_column(Money, default=0, comment="单位成本")
    sale_price: Mapped[float] = mapped_column(Money, default=0, comment="销售价格")
    barcode: Mapped[str | None] = mapped_column(String(50), nullable=True, comment="条码")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, comment="是否启用")


class Warehouse(Model):
    """仓库。"""

    __tablename__ = "warehouses"

    code: Mapped[str] = mapped_column(String(50), unique=True, index=True, comment="仓库编码")
    name: Mapped[str] = mapped_column(String(100), comment="仓库名称")
    description: Mapped[str | None] = mapped_column(Text, nullable=True, comment="描述")
    address: Mapped[str | None] = mapped_column(String(255), nullable=True, comment="地址")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, comment="是否启用")


# ==================== 销售 / 采购 ====================


class Customer(Model):
    """客户。"""

    __tablename__ = "customers"

    code: Mapped[str] = mapped_column(String(50), unique=True, index=True, comment="客户编码")
    name: Mapped[str] = mapped_column(String(100), index=True, comment="客户名称")
    customer_type: Mapped[str] = mapped_column(String(20), default="corporate", comment="客户类型")
    contact_name: Mapped[str | None] = mapped_column(String(50), nullable=True, comment="联系人")
    email: Mapped[str | None] = mapped_column(String(100), nullable=True, comment="邮箱")
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True, comment="电话")
    address: Mapped[str | None] = mapped_column(String(255), nullable=True, comment="地址")
    tax_number: Mapped[str | None] = mapped_column(String(50), nullable=True, comment="税号")
    credit_limit: Mapped[float] = mapped_column(Money, default=0, comment="信用额度")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, comment="是否启用")


class Supplier(Model):
    """供应商。"""

    __tablename__ = "suppliers"

    code: Mapped[str] = mapped_column(String(50), unique=True, index=True, comment="供应商编码")
    name: Mapped[str] = mapped_column(String(100), index=True, comment="供应商名称")
    contact_name: Mapped[str | None] = mapped_column(String(50), nullable=True, comment="联系人")
    email: Mapped[str | None] = mapped_column(String(100), nullable=True, comment="邮箱")
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True, comment="电话")
    address: Mapped[str | None] = mapped_column(String(255), nullable=True, comment="地址")
    tax_number: Mapped[str | None] = mapped_column(String(50), nullable=True, comment="税号")
    bank_account: Mapped[str | None] = mapped_column(String(30), nullable=True, comment="银行账号")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, comment="是否启用")


# ==================== 生产 ====================


class Product(Model):
    """产品。"""

    __tablename__ = "products"

    code: Mapped[str] = mapped_column(String(50), unique=True, index=True, comment="产品编码")
    name: Mapped[str] = mapped_column(String(100), index=True, comment="产品名称")
    description: Mapped[str | None] = mapped_column(Text, nullable=True, comment="描述")
    category: Mapped[str | None] = mapped_column(String(50), nullable=True, comment="分类")
    unit: Mapped[str] = mapped_column(String(20), default="pcs", comment="单位")
    price: Mapped[float] = mapped_column(Money, default=0, comment="售价")
    cost: Mapped[float] = mapped_column(Money, default=0, comment="成本")
    status: Mapped[str] = mapped_column(String(20), default="active", comment="状态")


# ==================== 人力 / 组织 ====================


class Department(Model):
    """部门。"""

    __tablename__ = "departments"

    code: Mapped[str] = mapped_column(String(50), unique=True, index=True, comment="部门编码")
    name: Mapped[str] = mapped_column(String(100), comment="部门名称")
    description: Mapped[str | None] = mapped_column(Text, nullable=True, comment="描述")
    parent_id: Mapped[int | None] = mapped_column(
        ForeignKey("departments.id"), nullable=True, comment="上级部门ID"
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, comment="是否启用")


class Employee(Model):
    """员工。"""

    __tablename__ = "employees"

    code: Mapped[str] = mapped_column(String(50), unique=True, index=True, comment="员工编号")
    first_name: Mapped[str] = mapped_column(String(50), comment="名")
    last_name: Mapped[str] = mapped_column(String(50), comment="姓")
    email: Mapped[str | None] = mapped_column(String(100), nullable=True, comment="邮箱")
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True, comment="电话")
    gender: Mapped[str | None] = mapped_column(String(10), nullable=True, comment="性别")
    hire_date: Mapped[date | None] = mapped_column(Date, nullable=True, comment="入职日期")
    department_id: Mapped[int | None] = mapped_column(Integer, nullable=True, comment="部门ID")
    position: Mapped[str | None] = mapped_column(String(50), nullable=True, comment="职位")
    id_number: Mapped[str | None] = mapped_column(String(18), nullable=True, comment="身份证号")
    status: Mapped[str] = mapped_column(String(20), default="active", comment="状态")


# ==================== 项目 ====================


class Project(Model):
    """项目。"""

    __tablename__ = "projects"

    code: Mapped[str] = mapped_column(String(50), unique=True, index=True, comment="项目编码")
    name: Mapped[str] = mapped_column(String(100), index=True, comment="项目名称")
    description: Mapped[str | None] = mapped_column(Text, nullable=True, comment="描述")
    start_date: Mapped[date] = mapped_column(Date, comment="开始日期")
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True, comment="结束日期")
    status: Mapped[str] = mapped_column(String(20), default="planning", comment="状态")
    priority: Mapped[str] = mapped_column(String(20), default="medium", comment="优先级")
    budget: Mapped[float] = mapped_column(Money, default=0, comment="预算")
    manager_id: Mapped[int] = mapped_column(Integer, comment="项目经理ID")


__all__ = [
    "Customer",
    "Department",
    "Employee",
    "Item",
    "Product",
    "Project",
    "Supplier",
    "Warehouse",
]
