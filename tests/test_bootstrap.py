from src.mess_system.mess_system.database.bootstrap import iter_sql_statements


def test_splits_statements_and_drops_comments():
    sql = """
    -- users
    CREATE TABLE a (id INT);
    INSERT IGNORE INTO a VALUES (1);

    -- trailing statement without semicolon
    SELECT 1
    """
    assert list(iter_sql_statements(sql)) == [
        "CREATE TABLE a (id INT)",
        "INSERT IGNORE INTO a VALUES (1)",
        "SELECT 1",
    ]


def test_semicolons_inside_literals_are_kept():
    sql = "INSERT INTO t VALUES ('a;b'); INSERT INTO t VALUES ('c');"
    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        "INSERT INTO t VALUES ('c')",
    ]
