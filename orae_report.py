"""Entry point for ORAE: Othello Replay Analytics Engine.

Usage: python orae_report.py [replays.json]
"""

import sys
from pathlib import Path

from PyQt6.QtCore import QCoreApplication

from orae.config.config_loader import ConfigLoader
from orae.controllers.replay_list_controller import ReplayListController
from orae.controllers.replay_viewer_controller import ReplayViewerController
from orae.services.error_handler import ErrorHandler
from orae.services.logging_service import LoggingService
from orae.services.replay_loader_service import ReplayLoaderService
from orae.services.replay_statistics_service import ReplayStatistics
from orae.services.sample_replay_service import SampleReplayService


SAMPLE_REPLAY_COUNT = 25
PREVIEW_ROWS = 10


def print_statistics(statistics: ReplayStatistics) -> None:
    """Print the statistics summary."""
    print(f"Games: {statistics.total_games}  Win rate: {statistics.win_rate:.1f}%  "
          f"Avg duration: {statistics.average_game_duration}s  "
          f"Avg moves: {statistics.average_moves_per_game}")
    for mode, performance in statistics.performance_by_mode.items():
        rating = f"{performance.average_rating:.0f}" if performance.average_rating is not None else "-"
        print(f"  {mode.value:<7} games {performance.games:>3}  win rate {performance.win_rate:5.1f}%  "
              f"avg rating {rating}")
    for days, bucket in statistics.recent_trends.items():
        print(f"  last {days:>2} days: {bucket.games} games, {bucket.win_rate:.1f}% won")
    for opening in statistics.favorite_openings:
        print(f"  opening {opening.name}: {opening.count} games, {opening.win_rate:.1f}% won")
    for opponent in statistics.strongest_opponents:
        print(f"  opponent {opponent.name}: {opponent.games_played} games, {opponent.win_rate:.1f}% won")


def main() -> None:
    """Run the replay analytics report."""
    ErrorHandler.setup_exception_handler()

    try:
        app = QCoreApplication(sys.argv)
        app.setApplicationName("ORAE")
        app.setOrganizationName("ORAE")

        config = ConfigLoader().load()
        logging_service = LoggingService.get_instance(config)

        if len(sys.argv) > 1:
            replays, rejected = ReplayLoaderService.load_replays_file(Path(sys.argv[1]))
            for index, reasons in rejected.items():
                print(f"Skipped record {index}: {'; '.join(reasons)}", file=sys.stderr)
        else:
            replays = SampleReplayService(config).generate(SAMPLE_REPLAY_COUNT, seed=7)

        list_controller = ReplayListController(config)
        list_controller.set_replays(replays)
        print_statistics(list_controller.statistics())

        print()
        for replay in list_controller.page_data()[:PREVIEW_ROWS]:
            score = replay.result.final_score
            print(f"{replay.id}  {replay.mode.value:<7} {replay.player_black.name} vs "
                  f"{replay.player_white.name}  {score.black}-{score.white}  "
                  f"{replay.game_info.total_moves} moves")

        viewer = ReplayViewerController(config)
        if list_controller.filtered_replays:
            viewer.open_replay(list_controller.filtered_replays[0])
            viewer.go_to_end()
            frame = viewer.current_frame()
            if frame is not None:
                print()
                print(repr(frame.board))
                if frame.commentary:
                    print(frame.commentary)

        print()
        for suggestion in viewer.performance_monitor.suggestions():
            print(suggestion)

        viewer.teardown()
        logging_service.shutdown()
    except Exception as e:
        ErrorHandler.handle_fatal_error(e, "Replay report")


if __name__ == "__main__":
    main()
