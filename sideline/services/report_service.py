"""Playtime reports for the Sideline Manager."""

from __future__ import annotations

import csv
import io
from collections import Counter
from typing import Dict, Optional, Protocol, Sequence

from ..models import Game, GameReport, Player, PlayerTimeSummary
from ..utils import EVENT_SUBSTITUTION, fmt_mmss
from .playtime import current_game_seconds, live_playtime_seconds

CSV_HEADER = [
    "Player", "Number", "Location", "Starter", "Playing Time",
    "Playing Seconds", "Subbed On", "Subbed Off", "Goals", "Assists",
]


class ExportServiceInterface(Protocol):
    """Interface for report export."""

    def export_to_csv(self, report: GameReport) -> str:
        """Export report to CSV format."""
        ...


class GameReportExporter:
    """Writes a :class:`GameReport` as CSV text."""

    def export_to_csv(self, report: GameReport) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for summary in report.players:
            writer.writerow([
                summary.name,
                summary.number or "",
                summary.location,
                "yes" if summary.is_starter else "no",
                fmt_mmss(summary.playtime_seconds),
                summary.playtime_seconds,
                summary.subbed_on_count,
                summary.subbed_off_count,
                summary.goals,
                summary.assists,
            ])
        return buffer.getvalue()


class ReportService:
    """
    Build per-game reports of raw counters.

    Players are matched to lineup entries by id; entries whose player has
    been deleted are reported under their id.
    """

    def __init__(self, export_service: Optional[ExportServiceInterface] = None) -> None:
        self.export_service = export_service or GameReportExporter()

    def generate_game_report(self, game: Game, players: Sequence[Player], now: int) -> GameReport:
        """Build a :class:`GameReport` for ``game`` as of ``now``."""
        by_id: Dict[str, Player] = {player.id: player for player in players}
        goals = Counter(e.scorer_player_id for e in game.events if e.is_goal and e.scorer_player_id)
        assists = Counter(e.assist_player_id for e in game.events if e.is_goal and e.assist_player_id)

        summaries = []
        for entry in game.lineup:
            player = by_id.get(entry.id)
            summaries.append(
                PlayerTimeSummary(
                    player_id=entry.id,
                    name=player.full_name if player else entry.id,
                    number=player.number if player else None,
                    location=entry.location,
                    is_starter=entry.is_starter,
                    playtime_seconds=live_playtime_seconds(entry, now),
                    subbed_on_count=entry.subbed_on_count,
                    subbed_off_count=entry.subbed_off_count,
                    goals=goals.get(entry.id, 0),
                    assists=assists.get(entry.id, 0),
                )
            )
        summaries.sort(key=lambda item: (-item.playtime_seconds, item.name.lower()))

        return GameReport(
            game_id=game.id,
            generated_ms=now,
            elapsed_seconds=current_game_seconds(game, now),
            home_score=game.home_score,
            away_score=game.away_score,
            substitution_count=sum(1 for e in game.events if e.type == EVENT_SUBSTITUTION),
            players=summaries,
            total_playtime_seconds=sum(item.playtime_seconds for item in summaries),
        )

    def generate_report_csv(self, report: GameReport) -> str:
        return self.export_service.export_to_csv(report)
