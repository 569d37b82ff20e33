from datetime import datetime

import pytest

from dbbackup.errors import EmptyFilenameError
from dbbackup.services.filename import FilenamePolicy


def test_resolve_expands_date_then_database_name():
    policy = FilenamePolicy()

    assert policy.resolve("{DBNAME}-%Y.sql", "shop", datetime(2024, 5, 1)) == "shop-2024.sql"


def test_resolve_day_of_month_rotation():
    policy = FilenamePolicy()

    assert policy.resolve("{DBNAME}-%d.sql", "shop", datetime(2024, 5, 7)) == "shop-07.sql"


def test_resolve_does_not_reformat_database_name():
    policy = FilenamePolicy()

    assert policy.resolve("{DBNAME}.sql", "sales%d", datetime(2024, 5, 7)) == "sales%d.sql"


@pytest.mark.parametrize("template", ["", "   "])
def test_resolve_rejects_empty_result(template):
    policy = FilenamePolicy()

    with pytest.raises(EmptyFilenameError, match="Must have a filename"):
        policy.resolve(template, "shop", datetime(2024, 5, 1))


def test_resolve_path_joins_destination(tmp_path):
    policy = FilenamePolicy()

    resolved = policy.resolve_path(str(tmp_path), "{DBNAME}.sql", "shop", datetime(2024, 5, 1))

    assert resolved == str(tmp_path / "shop.sql")
