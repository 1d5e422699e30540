"""
Pytest fixtures for the equivalency tests.

Factories build fresh, independent documents on every call so a test can
compare two isomorphic graphs without shared objects.
"""

from collections.abc import Callable
from pathlib import Path

import pytest
import yaml

from tablequiv.domain.tables import DataSet, DataTable, add_relation

# =============================================================================
# Table Factories
# =============================================================================

def build_customers(
    table_name: str = "Customers",
    table_cls: type[DataTable] = DataTable,
) -> DataTable:
    """Customers(Id, Name, City), primary key Id, two rows."""
    table = table_cls(table_name=table_name)
    table.add_column("Id", int)
    table.add_column("Name", str)
    table.add_column("City", str)
    table.set_primary_key("Id")
    table.add_row(1, "Ada", "London")
    table.add_row(2, "Grace", "New York")
    return table


def build_shop() -> DataSet:
    """
    Shop dataset: Customers 1 → n Orders, with a foreign key.

    Both tables see the relation (child_relations / parent_relations), and
    the relation refers back to both tables.
    """
    dataset = DataSet(dataset_name="Shop")
    customers = dataset.add_table(build_customers())

    orders = dataset.add_table("Orders")
    orders.add_column("OrderId", int)
    orders.add_column("CustomerId", int)
    orders.add_column("Total", float)
    orders.set_primary_key("OrderId")
    orders.add_row(10, 1, 99.5)
    orders.add_row(11, 2, 12.0)
    orders.add_row(12, 1, 7.25)

    dataset.add_relation(
        "CustomerOrders",
        customers.column("Id"),
        orders.column("CustomerId"),
        create_constraints=True,
    )
    return dataset


def build_linked_pair() -> tuple[DataTable, DataTable]:
    """Two tables without a dataset, linked both ways (A → B and B → A)."""
    a = DataTable(table_name="A")
    a.add_column("Key", int)
    a.add_column("BKey", int)
    a.add_row(1, 2)

    b = DataTable(table_name="B")
    b.add_column("Key", int)
    b.add_column("AKey", int)
    b.add_row(2, 1)

    add_relation("A_B", a.column("Key"), b.column("AKey"))
    add_relation("B_A", b.column("Key"), a.column("BKey"))
    return a, b


@pytest.fixture
def make_customers() -> Callable[..., DataTable]:
    return build_customers


@pytest.fixture
def make_shop() -> Callable[[], DataSet]:
    return build_shop


@pytest.fixture
def make_linked_pair() -> Callable[[], tuple[DataTable, DataTable]]:
    return build_linked_pair


@pytest.fixture
def customers() -> DataTable:
    return build_customers()


# =============================================================================
# Options File Fixtures
# =============================================================================

@pytest.fixture
def write_options(tmp_path: Path) -> Callable[[dict], Path]:
    """Write a dict as an options YAML file and return its path."""
    def _write(data: dict, name: str = "options.yaml") -> Path:
        path = tmp_path / name
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, allow_unicode=True, sort_keys=False)
        return path

    return _write
