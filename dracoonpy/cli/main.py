"""DRACOON CLI - Upload commands."""
import asyncio
import signal
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn

from dracoonpy.core.upload.models import UploadProgress
from dracoonpy.core.upload.protocols import FileUploadCallback

app = typer.Typer(
    name="dracoon",
    help="DRACOON upload CLI",
    add_completion=False
)
console = Console()

STDIN_READ_SIZE = 64 * 1024


def run_async(coro):
    """Run async function."""
    return asyncio.run(coro)


def build_request(parent_id: int, name: str, classification: int, resolution: str,
                  notes: Optional[str]):
    from dracoonpy import FileUploadRequest
    
    try:
        return FileUploadRequest(
            parent_id=parent_id,
            name=name,
            classification=classification,
            notes=notes,
            resolution_strategy=resolution
        )
    except ValueError as e:
        console.print(f"[red]Invalid upload request: {e}[/red]")
        raise typer.Exit(2)


def build_client(server: str, token: str, insecure: bool = False,
                 ca_file: Optional[str] = None, proxy: Optional[str] = None):
    from dracoonpy import APIConfig, DracoonClient, SSLConfig
    
    config = APIConfig(
        server_url=server,
        proxy_url=proxy,
        ssl=SSLConfig(verify=not insecure, ca_file=ca_file)
    )
    return DracoonClient(server, token, config=config)


class ProgressCallback(FileUploadCallback):
    """Feeds upload callbacks into a rich progress bar."""
    
    def __init__(self, progress: Progress, task_id):
        self._progress = progress
        self._task_id = task_id
        self.canceled = False
    
    def on_running(self, upload_id: str, bytes_sent: int, bytes_total: int) -> None:
        state = UploadProgress(bytes_sent=bytes_sent, bytes_total=bytes_total)
        self._progress.update(self._task_id, completed=state.percentage)
    
    def on_finished(self, upload_id: str, node) -> None:
        self._progress.update(self._task_id, completed=100)
    
    def on_canceled(self, upload_id: str) -> None:
        self.canceled = True


@app.command()
def upload(
    file_path: Path = typer.Argument(..., help="Local file to upload", exists=True, dir_okay=False),
    server: str = typer.Option(..., "--server", "-s", help="DRACOON server URL"),
    parent_id: int = typer.Option(..., "--parent-id", "-p", help="Target room or folder ID"),
    token: str = typer.Option(..., "--token", envvar="DRACOON_TOKEN", help="Access token"),
    name: str = typer.Option(None, "--name", "-n", help="Custom file name"),
    classification: int = typer.Option(2, "--classification", "-c", help="Classification (1-4)"),
    resolution: str = typer.Option("autorename", "--resolution", "-r",
                                   help="autorename, overwrite or fail"),
    notes: str = typer.Option(None, "--notes", help="File notes"),
    insecure: bool = typer.Option(False, "--insecure", help="Disable TLS verification"),
    ca_file: str = typer.Option(None, "--ca-file", help="CA bundle for a privately signed server"),
    proxy: str = typer.Option(None, "--proxy", envvar="HTTPS_PROXY", help="HTTP(S) proxy URL"),
):
    """Upload a file. Ctrl-C cancels the upload."""
    from dracoonpy import DracoonException
    from dracoonpy.core.upload.services import AsyncFileReader, FileValidator
    
    request = build_request(parent_id, name or file_path.name, classification, resolution, notes)
    path, size = FileValidator().validate(file_path)
    
    async def do_upload():
        async with build_client(server, token, insecure, ca_file, proxy) as dracoon:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                console=console
            ) as progress:
                task_id = progress.add_task(f"Uploading {path.name}", total=100)
                callback = ProgressCallback(progress, task_id)
                
                async with AsyncFileReader().open(path) as source:
                    file_upload = dracoon.uploads.start_upload(request, source, size, callback=callback)
                    loop = asyncio.get_running_loop()
                    try:
                        loop.add_signal_handler(signal.SIGINT, file_upload.cancel)
                    except (NotImplementedError, RuntimeError):
                        pass
                    try:
                        node = await file_upload.task
                    finally:
                        try:
                            loop.remove_signal_handler(signal.SIGINT)
                        except (NotImplementedError, RuntimeError):
                            pass
            
            if callback.canceled:
                console.print("[yellow]Upload canceled[/yellow]")
                raise typer.Exit(130)
            if node is None:
                console.print("[red]Upload failed (see log for details)[/red]")
                raise typer.Exit(1)
            
            console.print(f"[green]Uploaded:[/green] {node.name}")
            console.print(f"Node ID: {node.id}")
            if node.size is not None:
                console.print(f"Size: {node.size:,} bytes")
    
    try:
        run_async(do_upload())
    except DracoonException as e:
        console.print(f"[red]Upload failed: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def stream(
    name: str = typer.Argument(..., help="Name of the file to create"),
    server: str = typer.Option(..., "--server", "-s", help="DRACOON server URL"),
    parent_id: int = typer.Option(..., "--parent-id", "-p", help="Target room or folder ID"),
    token: str = typer.Option(..., "--token", envvar="DRACOON_TOKEN", help="Access token"),
    classification: int = typer.Option(2, "--classification", "-c", help="Classification (1-4)"),
    resolution: str = typer.Option("autorename", "--resolution", "-r",
                                   help="autorename, overwrite or fail"),
    insecure: bool = typer.Option(False, "--insecure", help="Disable TLS verification"),
    ca_file: str = typer.Option(None, "--ca-file", help="CA bundle for a privately signed server"),
    proxy: str = typer.Option(None, "--proxy", envvar="HTTPS_PROXY", help="HTTP(S) proxy URL"),
):
    """Upload everything read from stdin as a single file."""
    from dracoonpy import DracoonException
    
    request = build_request(parent_id, name, classification, resolution, None)
    
    async def do_stream():
        async with build_client(server, token, insecure, ca_file, proxy) as dracoon:
            upload_stream = await dracoon.uploads.create_upload_stream(request)
            stdin = sys.stdin.buffer
            while True:
                data = stdin.read(STDIN_READ_SIZE)
                if not data:
                    break
                await upload_stream.write(data)
            node = await upload_stream.close()
            console.print(f"[green]Uploaded:[/green] {node.name} ({upload_stream.bytes_written:,} bytes)")
            console.print(f"Node ID: {node.id}")
    
    try:
        run_async(do_stream())
    except DracoonException as e:
        console.print(f"[red]Stream upload failed: {e}[/red]")
        raise typer.Exit(1)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
