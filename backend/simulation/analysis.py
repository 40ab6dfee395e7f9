"""
Analysis tools for self-play results.
"""

from typing import Any, Dict, List

import pandas as pd

SUMMARY_COLUMNS = ["matchup", "games", "x_wins", "o_wins", "ties",
                   "x_win_rate", "o_win_rate", "tie_rate", "avg_moves", "avg_x_move_ms", "avg_o_move_ms"]


def results_to_frame(results: List[Dict[str, Any]]) -> pd.DataFrame:
    """Flatten game result dicts into one row per game."""
    rows = []
    for result in results:
        rows.append({
            "game_id": result["game_id"],
            "matchup": f"{result['x_config']['difficulty']}_vs_{result['o_config']['difficulty']}",
            "size": result["size"],
            "winner": result["winner"],
            "moves": result["moves"],
            "avg_x_move_ms": result["avg_x_move_ms"],
            "avg_o_move_ms": result["avg_o_move_ms"],
            "fallbacks": result.get("fallbacks", 0),
        })
    return pd.DataFrame(rows)


def summarize_results(results: List[Dict[str, Any]]) -> pd.DataFrame:
    """
    Win, loss and tie rates per matchup.

    Args:
        results: Game result dicts as returned by GameRunner.run_game

    Returns:
        DataFrame with one row per matchup
    """
    df = results_to_frame(results)
    if df.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    summary = df.groupby("matchup").agg(
        games=("game_id", "count"),
        x_wins=("winner", lambda w: int((w == "X").sum())),
        o_wins=("winner", lambda w: int((w == "O").sum())),
        ties=("winner", lambda w: int((w == "tie").sum())),
        avg_moves=("moves", "mean"),
        avg_x_move_ms=("avg_x_move_ms", "mean"),
        avg_o_move_ms=("avg_o_move_ms", "mean"),
    ).reset_index()

    summary["x_win_rate"] = summary["x_wins"] / summary["games"]
    summary["o_win_rate"] = summary["o_wins"] / summary["games"]
    summary["tie_rate"] = summary["ties"] / summary["games"]

    return summary[SUMMARY_COLUMNS]
