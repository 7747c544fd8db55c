"""Canned SQL statement templates."""

from __future__ import annotations

import re
from typing import NamedTuple

# ${1:default}, ${name} and the terminal ${}
_PLACEHOLDER = re.compile(r"\$\{(?:\d+:)?([^}]*)\}")


class SqlSnippet(NamedTuple):
    label: str
    template: str
    detail: str
    priority: int  # 0 sorts first among snippets

    @property
    def text(self) -> str:
        return render_template(self.template)


def render_template(template: str) -> str:
    """Replace editor placeholders with their default text."""
    return _PLACEHOLDER.sub(lambda m: m.group(1), template)


SQL_SNIPPETS: tuple[SqlSnippet, ...] = (
    SqlSnippet(
        "SELECT",
        "SELECT ${columns}\nFROM ${table}\nWHERE ${condition}\nLIMIT ${limit};${}",
        "Basic SELECT query",
        0,
    ),
    SqlSnippet(
        "SELECT JOIN",
        "SELECT ${1:t1}.${2:column1}, ${3:t2}.${4:column2}\n"
        "FROM ${5:table1} ${1:t1}\n"
        "INNER JOIN ${6:table2} ${3:t2} ON ${1:t1}.${7:id} = ${3:t2}.${8:foreign_id}\n"
        "WHERE ${9:condition}\n"
        "LIMIT ${10:50};${}",
        "SELECT with INNER JOIN",
        1,
    ),
    SqlSnippet(
        "INSERT",
        "INSERT INTO ${1:table} (${2:column1}, ${3:column2}, ${4:column3})\n"
        "VALUES (${5:value1}, ${6:value2}, ${7:value3})\n"
        "RETURNING *;${}",
        "Insert new row",
        2,
    ),
    SqlSnippet(
        "UPDATE",
        "UPDATE ${1:table}\n"
        "SET ${2:column1} = ${3:value1},\n"
        "    ${4:column2} = ${5:value2}\n"
        "WHERE ${6:id} = ${7:value}\n"
        "RETURNING *;${}",
        "Update existing rows",
        2,
    ),
    SqlSnippet(
        "DELETE",
        "DELETE FROM ${1:table}\nWHERE ${2:condition}\nRETURNING *;${}",
        "Delete rows",
        2,
    ),
    SqlSnippet(
        "CREATE TABLE",
        "CREATE TABLE ${1:table_name} (\n"
        "  ${2:id} SERIAL PRIMARY KEY,\n"
        "  ${3:column1} ${4:VARCHAR(255)} NOT NULL,\n"
        "  ${5:column2} ${6:INTEGER},\n"
        "  ${7:created_at} TIMESTAMP DEFAULT NOW()\n"
        ");${}",
        "Create new table",
        3,
    ),
    SqlSnippet(
        "LEFT JOIN",
        "SELECT ${1:t1}.${2:*}\n"
        "FROM ${3:table1} ${1:t1}\n"
        "LEFT JOIN ${4:table2} ${5:t2} ON ${1:t1}.${6:id} = ${5:t2}.${7:foreign_id}\n"
        "WHERE ${8:condition};${}",
        "SELECT with LEFT JOIN",
        1,
    ),
    SqlSnippet(
        "COUNT GROUP",
        "SELECT ${1:column}, COUNT(*) as ${2:count}\n"
        "FROM ${3:table}\n"
        "GROUP BY ${1:column}\n"
        "ORDER BY ${2:count} DESC\n"
        "LIMIT ${4:10};${}",
        "Count with GROUP BY",
        3,
    ),
)
