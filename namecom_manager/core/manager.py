"""
NameCom Manager - Plan and apply registrar resources

This module drives the resource lifecycle adapters: it refreshes known
resources, compares them with the desired definitions, and creates, updates,
replaces or deletes resources one at a time, keeping the state file current.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ..errors import ConfigurationError, NameComError
from ..parsers.resources import ResourceParser
from ..providers.dns_client import DNSClient
from .dnssec_manager import DNSSECManager
from .models import ResourceState
from .nameserver_manager import NameserverManager
from .record_manager import RecordManager
from .resource_manager import ResourceDiff, ResourceManager
from .state import StateStore

# Initialize rich console and logger
console = Console()
logger = logging.getLogger(__name__)


class NameComManager:
    """Main class that orchestrates refresh, planning and apply."""

    def __init__(self, config: Dict):
        """Initialize the manager with configuration."""
        self.config = config or {}
        self.dns_client = DNSClient(self.config)
        self.resources: Dict[str, ResourceManager] = {
            manager.resource_type: manager
            for manager in (
                RecordManager(self.dns_client),
                NameserverManager(self.dns_client),
                DNSSECManager(self.dns_client),
            )
        }

    def resource_for(self, address: str) -> ResourceManager:
        """Resolve a "type.name" address to its resource manager."""
        resource_type, _, name = address.partition(".")
        manager = self.resources.get(resource_type)
        if manager is None or not name:
            raise ConfigurationError(f"Invalid resource address '{address}'")
        return manager

    def process(
        self,
        resources_path: str,
        state_path: str,
        dry_run: bool = False,
        output_file: Optional[str] = None,
    ) -> bool:
        """Plan the resources file against the state file and apply the result."""
        try:
            desired = ResourceParser(resources_path).parse()
            store = StateStore(state_path)
            state = store.load()

            console.print(f"[green]Successfully parsed {len(desired)} resources[/green]")
            console.print("[green]Refreshing current state...[/green]")
            changes = self.plan(desired, state)
            self._display_changes_summary(changes)

            if dry_run:
                console.print("[yellow]DRY RUN MODE - No changes will be applied[/yellow]")
                if output_file:
                    self._save_dry_run_output(changes, output_file)
                    console.print(f"[green]Dry run output saved to: {output_file}[/green]")
                return True

            if changes["total_changes"] == 0:
                self._adopt_refreshed(changes, state)
                store.save(state)
                console.print("[green]No changes required - resources are up to date[/green]")
                return True

            self._confirm_changes(changes)
            success = self.apply(changes, state)
            store.save(state)
            if success:
                console.print("[green]All changes applied successfully![/green]")
            else:
                console.print("[red]Some changes failed to apply[/red]")
            return success

        except (NameComError, OSError) as e:
            logger.error(f"Error processing resources: {e}")
            console.print(f"[red]Error: {e}[/red]")
            return False

    def plan(self, desired: Dict[str, Dict], state: Dict[str, Dict]) -> Dict:
        """
        Refresh the state and compare it with the desired resources.

        Args:
            desired: Desired resource fields keyed by address
            state: Last known resource fields keyed by address

        Returns:
            Dictionary containing categorized changes and the refreshed states
        """
        logger.info("Refreshing and analyzing resource changes...")

        refreshed: Dict[str, ResourceState] = {}
        for address, fields in state.items():
            manager = self.resource_for(address)
            current = manager.read(manager.state_class.from_dict(fields))
            if current is None:
                logger.info(f"{address} no longer exists remotely, removed from state")
                continue
            refreshed[address] = current

        creates, updates, replaces, deletes, no_changes = [], [], [], [], []

        for address, fields in desired.items():
            manager = self.resource_for(address)
            config = manager.from_config(fields)
            current = refreshed.get(address)
            change = {"address": address, "current": current, "desired": config, "diff": None}

            if current is None:
                creates.append(change)
                logger.info(f"Create needed: {address}")
                continue

            diff = manager.diff(current, config)
            change["diff"] = diff
            if diff.action == "no-op":
                no_changes.append(change)
                logger.info(f"No change needed: {address}")
            elif diff.action == "replace":
                replaces.append(change)
                logger.info(f"Replace needed: {address} ({self._describe(diff)})")
            else:
                updates.append(change)
                logger.info(f"Update needed: {address} ({self._describe(diff)})")

        for address, current in refreshed.items():
            if address not in desired:
                deletes.append({"address": address, "current": current, "desired": None, "diff": None})
                logger.info(f"Delete needed: {address}")

        total_changes = len(creates) + len(updates) + len(replaces) + len(deletes)
        logger.info(
            f"Change analysis complete: {len(creates)} creates, {len(updates)} updates, "
            f"{len(replaces)} replaces, {len(deletes)} deletes, {len(no_changes)} no changes"
        )

        return {
            "creates": creates,
            "updates": updates,
            "replaces": replaces,
            "deletes": deletes,
            "no_changes": no_changes,
            "total_changes": total_changes,
            "refreshed": refreshed,
        }

    def apply(self, changes: Dict, state: Dict[str, Dict]) -> bool:
        """Apply planned changes, updating the state mapping as each one succeeds."""
        self._adopt_refreshed(changes, state)
        success_count = 0
        total_changes = changes["total_changes"]

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("Applying changes...", total=total_changes)

            for change in changes["creates"]:
                if self._run(change, "create", state):
                    success_count += 1
                progress.update(task, advance=1)

            for change in changes["updates"]:
                if self._run(change, "update", state):
                    success_count += 1
                progress.update(task, advance=1)

            for change in changes["replaces"]:
                if self._run(change, "replace", state):
                    success_count += 1
                progress.update(task, advance=1)

            for change in changes["deletes"]:
                if self._run(change, "delete", state):
                    success_count += 1
                progress.update(task, advance=1)

        console.print(f"[blue]Successfully applied {success_count}/{total_changes} changes[/blue]")
        return success_count == total_changes

    def _run(self, change: Dict, operation: str, state: Dict[str, Dict]) -> bool:
        address = change["address"]
        manager = self.resource_for(address)
        try:
            if operation in ("delete", "replace"):
                manager.delete(change["current"])
                state.pop(address, None)
            if operation in ("create", "replace"):
                result = manager.create(change["desired"])
            elif operation == "update":
                result = manager.update(change["current"], change["desired"])
            else:
                result = None

            if result is not None:
                state[address] = result.to_dict()
            logger.info(f"{operation.capitalize()}d {address}")
            return True
        except NameComError as e:
            logger.error(f"Failed to {operation} {address}: {e}")
            console.print(f"[red]Failed to {operation} {address}: {e}[/red]")
            return False

    def import_resource(self, address: str, identifier: str, state: Dict[str, Dict]) -> ResourceState:
        """Adopt an existing remote resource into the state under the given address."""
        if address in state:
            raise ConfigurationError(f"{address} is already managed; remove it from state first")

        manager = self.resource_for(address)
        imported = manager.import_state(identifier)
        state[address] = imported[0].to_dict()
        logger.info(f"Imported {address} from {identifier}")
        return imported[0]

    def destroy(self, state: Dict[str, Dict]) -> bool:
        """Refresh and delete every resource in the state."""
        success = True
        for address, fields in list(state.items()):
            manager = self.resource_for(address)
            try:
                current = manager.read(manager.state_class.from_dict(fields))
            except NameComError as e:
                logger.error(f"Failed to refresh {address}: {e}")
                console.print(f"[red]Failed to refresh {address}: {e}[/red]")
                success = False
                continue

            if current is None:
                logger.info(f"{address} no longer exists remotely, removed from state")
                state.pop(address)
                continue

            change = {"address": address, "current": current, "desired": None, "diff": None}
            success = self._run(change, "delete", state) and success
        return success

    def _adopt_refreshed(self, changes: Dict, state: Dict[str, Dict]) -> None:
        state.clear()
        state.update({address: current.to_dict() for address, current in changes["refreshed"].items()})

    @staticmethod
    def _describe(diff: ResourceDiff) -> str:
        return ", ".join(f"{name}: {old!r} -> {new!r}" for name, (old, new) in diff.changes.items())

    def _display_changes_summary(self, changes: Dict):
        """Display a summary of planned changes."""
        table = Table(title="Resource Changes Summary")
        table.add_column("Operation", style="cyan")
        table.add_column("Count", style="magenta")
        table.add_column("Details", style="white")

        for key, label in (
            ("creates", "Create"),
            ("updates", "Update"),
            ("replaces", "Replace"),
            ("deletes", "Delete"),
            ("no_changes", "No Change"),
        ):
            if changes[key]:
                table.add_row(label, str(len(changes[key])), ", ".join(c["address"] for c in changes[key]))

        console.print(table)
        console.print(f"\n[bold]Total changes: {changes['total_changes']}[/bold]")

    def _confirm_changes(self, changes: Dict):
        """Show the changes about to be applied."""
        console.print(f"\n[bold]About to apply {changes['total_changes']} changes[/bold]")

        for line in self._change_lines(changes):
            console.print(line)

    def _change_lines(self, changes: Dict) -> List[str]:
        lines = []
        for change in changes.get("creates", []):
            lines.append(f"  + {change['address']}")
        for change in changes.get("updates", []):
            lines.append(f"  ~ {change['address']} ({self._describe(change['diff'])})")
        for change in changes.get("replaces", []):
            lines.append(f"  -/+ {change['address']} ({self._describe(change['diff'])})")
        for change in changes.get("deletes", []):
            lines.append(f"  - {change['address']}")
        return lines

    def _save_dry_run_output(self, changes: Dict, output_file: str):
        """Save dry run output to a file."""
        try:
            with open(output_file, "w") as f:
                f.write("=" * 60 + "\n")
                f.write("NAMECOM MANAGER - DRY RUN SUMMARY\n")
                f.write("=" * 60 + "\n\n")

                f.write(f"Total Changes: {changes['total_changes']}\n")
                f.write(f"Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n\n")

                for line in self._change_lines(changes):
                    f.write(line + "\n")
                for change in changes.get("no_changes", []):
                    f.write(f"  = {change['address']}\n")

                f.write("\n" + "=" * 60 + "\n")
                f.write("END OF DRY RUN SUMMARY\n")
                f.write("=" * 60 + "\n")

            logger.info(f"Dry run output saved to: {output_file}")
        except OSError as e:
            logger.error(f"Failed to save dry run output to {output_file}: {e}")
            console.print(f"[red]Warning: Failed to save dry run output to {output_file}: {e}[/red]")
