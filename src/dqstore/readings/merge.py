"""
Upsert of new sensor readings into existing tables.
"""

import logging
from typing import Sequence

import polars as pl

logger = logging.getLogger(__name__)

_CURRENT_ROW = "__current_row"
_INCOMING_ROW = "__incoming_row"


class TableMergeUtility:
    """Merges tables by a set of join columns."""

    @staticmethod
    def merge_new_results(current: pl.DataFrame, incoming: pl.DataFrame,
                          join_columns: Sequence[str]) -> pl.DataFrame:
        """
        Merges new rows into the current table.

        Only the join columns are compared and null keys are equal to each
        other. A current row with the same key as an incoming row is replaced
        by the incoming row at its position,
        current rows without a match are kept in their order and incoming
        rows without a match are appended in their input order. When the
        incoming table repeats a key, its last row wins.

        Args:
            current: Table with the existing rows
            incoming: Table with the new rows
            join_columns: Columns identifying a row

        Returns:
            The merged table with the columns of the current table, followed
            by the columns only present in the incoming table
        """
        join_columns = list(join_columns)
        output_columns = current.columns + [column for column in incoming.columns if column not in current.columns]
        if incoming.height == 0:
            return current.clone()

        deduplicated = incoming.unique(subset=join_columns, keep="last", maintain_order=True)
        if deduplicated.height < incoming.height:
            logger.debug(f"Dropped {incoming.height - deduplicated.height} incoming rows with repeated keys")

        numbered_incoming = deduplicated.with_row_index(_INCOMING_ROW)
        numbered_current = current.with_row_index(_CURRENT_ROW)
        current_keys = numbered_current.select(join_columns + [_CURRENT_ROW])

        replaced = current_keys.join(numbered_incoming, on=join_columns, how="inner", nulls_equal=True)
        retained = numbered_current.join(deduplicated.select(join_columns), on=join_columns, how="anti",
                                         nulls_equal=True)
        appended = numbered_incoming.join(current_keys.select(join_columns), on=join_columns, how="anti",
                                          nulls_equal=True)

        in_place = pl.concat([retained, replaced], how="diagonal_relaxed").sort(_CURRENT_ROW)
        merged = pl.concat([in_place, appended.sort(_INCOMING_ROW)], how="diagonal_relaxed")

        logger.debug(f"Merged {deduplicated.height} rows into {current.height} rows: "
                     f"{replaced.height} replaced, {appended.height} appended")
        return merged.select(output_columns)
