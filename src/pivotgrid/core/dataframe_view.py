"""
DataFrame View Engine - pandas-backed table and pivoted views.

Implements the SourceTable / ViewEngine protocols over an in-memory
DataFrame so the grid core can run without an external engine:

    table = DataFrameTable(df)
    view = await table.view(ViewConfig(row_pivots=["region"], columns=["sales"]))
    columns = await view.to_columns(start_row=0, end_row=20, start_col=0, end_col=5)

Row pivots produce a tree (root TOTAL row first) whose numeric columns are
summed and other columns counted. Column pivots spread each column over
every distinct combination of the column pivot values.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import pandas as pd

from ..constants import (
    COLUMN_PATH_SEPARATOR, ID_COLUMN, NUMERIC_TYPES, ROW_PATH_COLUMN,
    SORT_ASC, SORT_DESC, SORT_COL_ASC, SORT_COL_DESC,
)
from .view_config import COLUMN_SORT_DIRECTIONS, SORT_DIRECTIONS, ViewConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComputedColumn:
    """A column derived from the table: func(DataFrame) -> Series."""
    name: str
    func: Callable[[pd.DataFrame], pd.Series]


def infer_type(series: pd.Series) -> str:
    """Map a pandas column to a scalar type name."""
    dtype = series.dtype
    if pd.api.types.is_bool_dtype(dtype):
        return "boolean"
    if pd.api.types.is_integer_dtype(dtype):
        return "integer"
    if pd.api.types.is_float_dtype(dtype):
        return "float"
    if pd.api.types.is_datetime64_any_dtype(dtype):
        return "datetime"
    values = series.dropna()
    if len(values) > 0 and all(isinstance(v, date) and not isinstance(v, datetime) for v in values):
        return "date"
    return "string"


def _to_python(value: Any) -> Any:
    """Convert pandas/numpy scalars to plain Python values (nulls to None)."""
    if value is None or (pd.api.types.is_scalar(value) and pd.isna(value)):
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if hasattr(value, "item") and not isinstance(value, (str, bytes)):
        value = value.item()
    return value


def _stable_sort(items: List[Any], key: Callable[[Any], Any], descending: bool = False) -> List[Any]:
    """Stable sort with None keys last in both directions."""
    keyed = [(key(item), item) for item in items]
    present = [pair for pair in keyed if pair[0] is not None]
    missing = [pair for pair in keyed if pair[0] is None]
    present.sort(key=lambda pair: pair[0], reverse=descending)
    return [item for _, item in present + missing]


class DataFrameTable:
    """Source table over a pandas DataFrame."""

    def __init__(self, df: pd.DataFrame):
        self._df = df.reset_index(drop=True)
        self._df.columns = [str(col) for col in self._df.columns]

    @property
    def dataframe(self) -> pd.DataFrame:
        return self._df

    async def size(self) -> int:
        return len(self._df)

    async def schema(self) -> Dict[str, str]:
        return {col: infer_type(self._df[col]) for col in self._df.columns}

    async def computed_schema(self, computed_columns: Sequence[ComputedColumn] = ()) -> Dict[str, str]:
        frame = self.frame(computed_columns)
        return {c.name: infer_type(frame[c.name]) for c in computed_columns}

    def frame(self, computed_columns: Sequence[ComputedColumn] = ()) -> pd.DataFrame:
        """The table with the given computed columns added."""
        if not computed_columns:
            return self._df
        frame = self._df.copy()
        for computed in computed_columns:
            frame[computed.name] = computed.func(frame)
        return frame

    async def view(self, config: Optional[ViewConfig] = None) -> "DataFrameView":
        return DataFrameView(self, config or ViewConfig())


class _Node:
    """Row pivot tree node: path of group values and the record positions below it."""
    __slots__ = ('path', 'positions', 'children')

    def __init__(self, path: Tuple[Any, ...], positions: List[int]):
        self.path = path
        self.positions = positions
        self.children: List["_Node"] = []


class DataFrameView:
    """
    Pivoted, sorted view over a DataFrameTable.

    The row tree starts fully expanded. set_depth(d) expands exactly the
    nodes whose path has at most d values (the root has none); expand() and
    collapse() override single visible rows on top of that.
    """

    def __init__(self, table: DataFrameTable, config: ViewConfig):
        self._table = table
        self._frame = table.frame(config.computed_columns)
        self._computed_names = [c.name for c in config.computed_columns]

        columns = list(config.columns) if config.columns is not None else list(self._frame.columns)
        self._validate(config, columns)
        self._config = config.replace(columns=tuple(columns))
        self._columns = columns
        self._row_pivots = list(config.row_pivots)
        self._column_pivots = list(config.column_pivots)

        self._values: Dict[str, List[Any]] = {
            col: [_to_python(v) for v in self._frame[col].tolist()] for col in self._frame.columns
        }
        self._types = {col: infer_type(self._frame[col]) for col in self._frame.columns}
        self._agg_cache: Dict[Tuple[Any, ...], Any] = {}

        self._row_combos = self._build_row_combos()
        self._combos = self._build_combos()
        self._leaves = self._build_leaves()

        self._depth = len(self._row_pivots) - 1
        self._overrides: Dict[Tuple[Any, ...], bool] = {}
        self._root: Optional[_Node] = None
        self._flat_rows: List[int] = []
        if self._row_pivots:
            self._root = self._build_tree((), list(range(len(self._frame))))
        else:
            self._flat_rows = self._sort_records(list(range(len(self._frame))))
        self._visible: Optional[List[Any]] = None

        logger.debug(
            f"DataFrameView built: {len(self._frame)} records, {len(self._leaves)} leaf columns, "
            f"config={self._config.to_dict()}"
        )

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    def _validate(self, config: ViewConfig, columns: List[str]) -> None:
        available = set(self._frame.columns)
        for name in [*config.row_pivots, *config.column_pivots, *columns]:
            if name not in available:
                raise ValueError(f"Unknown column: {name}")
        for column_name, direction in config.sort:
            if column_name not in available:
                raise ValueError(f"Unknown sort column: {column_name}")
            if direction not in SORT_DIRECTIONS:
                raise ValueError(f"Unknown sort direction: {direction}")
            if direction in COLUMN_SORT_DIRECTIONS and not config.column_pivots:
                raise ValueError(f"'{direction}' requires column pivots")

    def _row_sort_terms(self) -> List[Tuple[str, str]]:
        return [term for term in self._config.sort if term[1] in (SORT_ASC, SORT_DESC)]

    def _col_sort_terms(self) -> List[Tuple[str, str]]:
        return [term for term in self._config.sort if term[1] in (SORT_COL_ASC, SORT_COL_DESC)]

    def _build_row_combos(self) -> List[Tuple[Any, ...]]:
        if not self._column_pivots:
            return []
        columns = [self._values[p] for p in self._column_pivots]
        return [tuple(values) for values in zip(*columns)]

    def _build_combos(self) -> List[Tuple[Any, ...]]:
        if not self._column_pivots:
            return []
        combos = list(dict.fromkeys(self._row_combos))
        for depth in reversed(range(len(self._column_pivots))):
            combos = _stable_sort(combos, key=lambda combo, d=depth: combo[d])
        all_positions = list(range(len(self._frame)))
        for column_name, direction in reversed(self._col_sort_terms()):
            combos = _stable_sort(
                combos,
                key=lambda combo, col=column_name: self._aggregate(all_positions, col, combo),
                descending=direction == SORT_COL_DESC,
            )
        return combos

    def _build_leaves(self) -> List[Tuple[Optional[Tuple[Any, ...]], str, str]]:
        if not self._column_pivots:
            return [(None, col, col) for col in self._columns]
        leaves = []
        for combo in self._combos:
            for col in self._columns:
                path = COLUMN_PATH_SEPARATOR.join([*("" if v is None else str(v) for v in combo), col])
                leaves.append((combo, col, path))
        return leaves

    def _build_tree(self, path: Tuple[Any, ...], positions: List[int]) -> _Node:
        node = _Node(path, positions)
        depth = len(path)
        if depth < len(self._row_pivots):
            pivot_values = self._values[self._row_pivots[depth]]
            groups: Dict[Any, List[int]] = {}
            for pos in positions:
                groups.setdefault(pivot_values[pos], []).append(pos)
            children = [self._build_tree(path + (key,), members) for key, members in groups.items()]
            children = _stable_sort(children, key=lambda child: child.path[-1])
            for column_name, direction in reversed(self._row_sort_terms()):
                children = _stable_sort(
                    children,
                    key=lambda child, col=column_name: self._aggregate(child.positions, col),
                    descending=direction == SORT_DESC,
                )
            node.children = children
        return node

    def _sort_records(self, positions: List[int]) -> List[int]:
        for column_name, direction in reversed(self._row_sort_terms()):
            values = self._values[column_name]
            positions = _stable_sort(positions, key=lambda pos: values[pos], descending=direction == SORT_DESC)
        return positions

    # -------------------------------------------------------------------------
    # Aggregation
    # -------------------------------------------------------------------------

    def _is_numeric(self, column_name: str) -> bool:
        return self._types[column_name] in NUMERIC_TYPES

    def _aggregate(self, positions: List[int], column_name: str, combo: Optional[Tuple[Any, ...]] = None) -> Any:
        """Sum (numeric) or count (other) of a column over record positions."""
        if combo is not None:
            positions = [pos for pos in positions if self._row_combos[pos] == combo]
        if not positions:
            return None
        values = [self._values[column_name][pos] for pos in positions]
        present = [v for v in values if v is not None]
        if self._is_numeric(column_name):
            return sum(present) if present else None
        return len(present)

    def _node_value(self, node: _Node, column_name: str, combo: Optional[Tuple[Any, ...]]) -> Any:
        key = (node.path, column_name, combo)
        if key not in self._agg_cache:
            self._agg_cache[key] = self._aggregate(node.positions, column_name, combo)
        return self._agg_cache[key]

    # -------------------------------------------------------------------------
    # Tree state
    # -------------------------------------------------------------------------

    def _is_expanded(self, node: _Node) -> bool:
        if not node.children:
            return False
        return self._overrides.get(node.path, len(node.path) <= self._depth)

    def _visible_rows(self) -> List[Any]:
        if self._visible is None:
            if self._root is None:
                self._visible = list(self._flat_rows)
            else:
                rows: List[_Node] = []
                stack = [self._root]
                while stack:
                    node = stack.pop()
                    rows.append(node)
                    if self._is_expanded(node):
                        stack.extend(reversed(node.children))
                self._visible = rows
        return self._visible

    def _node_at(self, row_index: int) -> _Node:
        if self._root is None:
            raise ValueError("View has no row pivots")
        rows = self._visible_rows()
        if row_index < 0 or row_index >= len(rows):
            raise IndexError(f"Row {row_index} out of range (0..{len(rows) - 1})")
        return rows[row_index]

    def _toggle(self, row_index: int, expanded: bool) -> int:
        node = self._node_at(row_index)
        if not node.children or self._is_expanded(node) == expanded:
            return 0
        before = len(self._visible_rows())
        self._overrides[node.path] = expanded
        self._visible = None
        return abs(len(self._visible_rows()) - before)

    # -------------------------------------------------------------------------
    # ViewEngine interface
    # -------------------------------------------------------------------------

    async def get_config(self) -> ViewConfig:
        return self._config

    def _view_type(self, column_name: str) -> str:
        if self._row_pivots and not self._is_numeric(column_name):
            return "integer"
        return self._types[column_name]

    async def schema(self) -> Dict[str, str]:
        return {
            col: self._view_type(col) for col in self._columns if col not in self._computed_names
        }

    async def computed_schema(self) -> Dict[str, str]:
        return {col: self._view_type(col) for col in self._computed_names}

    async def num_rows(self) -> int:
        return len(self._visible_rows())

    async def num_columns(self) -> int:
        return len(self._leaves)

    async def column_paths(self) -> List[str]:
        paths = [path for _, _, path in self._leaves]
        if self._row_pivots:
            paths.insert(0, ROW_PATH_COLUMN)
        return paths

    async def to_columns(
        self,
        start_row: int = 0,
        start_col: int = 0,
        end_row: Optional[int] = None,
        end_col: Optional[int] = None,
        id: bool = False,
    ) -> Dict[str, List[Any]]:
        rows = self._visible_rows()[start_row:end_row]
        leaves = self._leaves[start_col:end_col]
        result: Dict[str, List[Any]] = {}

        if self._root is not None:
            result[ROW_PATH_COLUMN] = [list(node.path) for node in rows]
            for combo, col, path in leaves:
                result[path] = [self._node_value(node, col, combo) for node in rows]
            if id:
                result[ID_COLUMN] = [list(node.path) for node in rows]
        else:
            for combo, col, path in leaves:
                values = self._values[col]
                result[path] = [
                    values[pos] if combo is None or self._row_combos[pos] == combo else None
                    for pos in rows
                ]
            if id:
                result[ID_COLUMN] = [[pos] for pos in rows]
        return result

    async def set_depth(self, depth: int) -> None:
        self._depth = depth
        self._overrides.clear()
        self._visible = None
        logger.debug(f"Depth set to {depth}: {len(self._visible_rows())} rows")

    async def collapse(self, row_index: int) -> int:
        return self._toggle(row_index, False)

    async def expand(self, row_index: int) -> int:
        return self._toggle(row_index, True)

    async def to_csv(self) -> str:
        """Visible rows as unformatted CSV (row paths joined with '|')."""
        columns = await self.to_columns()
        frame = pd.DataFrame({k: v for k, v in columns.items() if k != ROW_PATH_COLUMN})
        if ROW_PATH_COLUMN in columns:
            frame.insert(0, ROW_PATH_COLUMN, [
                COLUMN_PATH_SEPARATOR.join(str(v) for v in path) for path in columns[ROW_PATH_COLUMN]
            ])
        return frame.to_csv(index=False)
