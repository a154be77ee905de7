from typing import Any, Dict, List, Optional, Sequence

import click
from tabulate import tabulate

from ecsmanage.exceptions import EcsManageAppError


class TableRenderer:
    """
    Render a list of models (or dicts) as a text table.

    ``columns`` maps column header to where that column's value comes from::

        {
            'Service': 'name',
            'R': {'key': 'running_count', 'default': ''},
        }

    A plain string is an attribute name, looked up first on the object itself and then
    in ``obj.render_for_display()`` (or on the dict, for dicts).  The dict form adds a
    ``default`` for objects that don't have the value.
    """

    def __init__(
        self,
        columns: Dict[str, Any],
        ordering: str = None,
        tablefmt: str = 'simple',
        show_headers: bool = True
    ):
        """
        :param columns dict(str, Union[str, dict]): column header to value source
        :param ordering Union[str, None]: sort by this column header; prefix with "-" to reverse
        :param tablefmt str: the ``tablefmt`` to pass to tabulate()
        """
        if not isinstance(columns, dict):
            raise EcsManageAppError('TableRenderer: columns must be a dict, not {!r}'.format(columns))
        self.headers: List[str] = list(columns.keys())
        self.columns: List[Any] = list(columns.values())
        self.ordering: Optional[str] = ordering
        self.tablefmt: str = tablefmt
        self.show_headers: bool = show_headers

    def _lookup(self, obj: Any, key: str) -> Any:
        if hasattr(obj, key):
            return getattr(obj, key)
        if hasattr(obj, 'render_for_display'):
            return obj.render_for_display()[key]
        return obj[key]

    def get_value(self, obj: Any, column: Any) -> Any:
        key = column['key'] if isinstance(column, dict) else column
        try:
            return self._lookup(obj, key)
        except (KeyError, TypeError):
            if isinstance(column, dict) and 'default' in column:
                return column['default']
        raise EcsManageAppError(
            click.style('{}: no value for "{}" on {}'.format(self.__class__.__name__, key, obj), fg='red')
        )

    def sort(self, rows: List[List[Any]]) -> List[List[Any]]:
        if not self.ordering:
            return rows
        header = self.ordering.lstrip('-')
        index = self.headers.index(header)
        return sorted(rows, key=lambda row: row[index], reverse=self.ordering.startswith('-'))

    def render(self, data: Sequence[Any]) -> str:
        rows = self.sort([[self.get_value(obj, column) for column in self.columns] for obj in data])
        if self.show_headers:
            return tabulate(rows, headers=self.headers, tablefmt=self.tablefmt)
        return tabulate(rows, tablefmt=self.tablefmt)
