"""UI layer -- Rich dashboard and output formatters."""

from .dashboard import (
    ProgressDisplay,
    TargetBoard,
    console,
    create_histogram,
    print_client_info,
    print_final_results,
    print_header,
    print_ping_summary,
)
from .output import (
    create_result_json,
    format_target_line,
    format_text_result,
    save_json,
)

__all__ = [
    "ProgressDisplay",
    "TargetBoard",
    "console",
    "create_histogram",
    "create_result_json",
    "format_target_line",
    "format_text_result",
    "print_client_info",
    "print_final_results",
    "print_header",
    "print_ping_summary",
    "save_json",
]
