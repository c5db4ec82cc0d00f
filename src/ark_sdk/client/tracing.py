"""
Rich request/response trace for service clients.

Off by default; enabled per client with ``trace=True`` or process-wide
with ARK_SDK_HTTP_TRACE=1. Secrets are masked before printing.
"""
import json
from typing import Any, Dict

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from ..masking import mask_headers

console = Console(stderr=True)


def _format_body(body: Any) -> str:
    """Format body for pretty printing."""
    if body is None:
        return ""
    if isinstance(body, (dict, list)):
        return json.dumps(body, indent=2, ensure_ascii=False)
    if isinstance(body, bytes):
        try:
            return body.decode("utf-8")
        except UnicodeDecodeError:
            return f"<binary data: {len(body)} bytes>"
    return str(body)


def trace_request(method: str, url: str, headers: Dict[str, str], body: Any = None) -> None:
    """Print an outgoing request."""
    console.print(Panel(f"[bold cyan]{method}[/bold cyan] {url}", title="[bold blue]Request[/bold blue]"))
    console.print("[bold]Headers:[/bold]", mask_headers(headers))
    if body is not None:
        console.print(
            Panel(Syntax(_format_body(body), "json"), title="[bold]Request Body[/bold]")
        )


def trace_response(
    url: str,
    status: int,
    status_text: str,
    headers: Dict[str, str],
    data: Any = None,
) -> None:
    """Print a received response."""
    status_color = "green" if 200 <= status < 300 else "red"
    console.print(
        Panel(
            f"[bold {status_color}]{status}[/bold {status_color}] {status_text}",
            title=f"[bold blue]Response[/bold blue] ({url})",
        )
    )
    console.print("[bold]Headers:[/bold]", mask_headers(headers))
    if data:
        console.print(
            Panel(Syntax(_format_body(data), "json"), title=f"[bold]Response Body[/bold] (URL: {url})")
        )
