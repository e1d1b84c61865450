"""
Installer — orchestrates a full install into <project>/_prr/.

Steps: 1) copy bundled module sources
       2) compile *.agent.yaml to Markdown
       3) write module configs and output directories
       4) write CSV manifests and the installation manifest
       5) run IDE setup through the adapter registry
"""

import shutil
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List, Optional

import yaml

from pr_review import __version__
from pr_review.agent.compiler import AGENT_SOURCE_SUFFIX, compile_agent_file
from pr_review.core.paths import DEFAULT_MODULES, PRR_FOLDER_NAME, module_order
from pr_review.core.registry import AdapterRegistry, adapter_registry
from pr_review.core.types import DispatchResult, SetupOptions
from pr_review.utils import Colors

from . import config_collector, manifest_generator
from .detector import InstallationStatus, detect
from .manifest import write_manifest

MODULES_DIR = Path(__file__).parent.parent / "modules"


@dataclass
class InstallConfig:
    """Every answer an install needs; built by the CLI flags or the TUI."""
    project_dir: Path
    modules: List[str] = field(default_factory=lambda: list(DEFAULT_MODULES))
    ides: List[str] = field(default_factory=list)
    user_name: str = "Reviewer"
    communication_language: str = "English"
    output_folder: str = "_prr-output"
    target_repo: str = "."
    github_repo: str = ""
    project_name: str = ""
    platform: str = "auto"
    install_location: str = "global"
    action_type: str = "install"  # "install" | "update" | "quick-update"
    prr_folder_name: str = PRR_FOLDER_NAME

    @property
    def prr_dir(self) -> Path:
        return self.project_dir / self.prr_folder_name


@dataclass
class InstallSummary:
    modules: List[str] = field(default_factory=list)
    agents_compiled: int = 0
    ide_results: List[DispatchResult] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(r.success for r in self.ide_results)


class Installer:
    def __init__(
        self,
        registry: Optional[AdapterRegistry] = None,
        source_dir: Path = MODULES_DIR,
        verbose: bool = True,
    ):
        self.registry = registry or adapter_registry
        self.source_dir = source_dir
        self.verbose = verbose

    def _log(self, message: str, color: str = "") -> None:
        if self.verbose:
            print(f"{color}{message}{Colors.ENDC}" if color else message)

    # ---- install / update ----

    def install(self, config: InstallConfig) -> InstallSummary:
        """
        Install (or reinstall) the selected modules and configure IDEs.

        Raises:
            ValueError: none of the requested modules exist in the source tree
        """
        summary = InstallSummary()
        modules = self._resolve_modules(config.modules, summary)
        summary.modules = modules

        prr_dir = config.prr_dir
        prr_dir.mkdir(parents=True, exist_ok=True)
        self._log(f"{Colors.BOLD}Installing PR Review to {config.project_dir}...", Colors.BLUE)

        for module in modules:
            self._copy_module(module, prr_dir / module)
            self._log(f"  ✓ Module '{module}' installed", Colors.GREEN)

        summary.agents_compiled = self._compile_agents(prr_dir, modules, config, summary)

        config_collector.write_configs(prr_dir, config, modules)
        self._log("  ✓ Configuration written", Colors.GREEN)

        (config.project_dir / (config.output_folder or "_prr-output") / "reviews").mkdir(parents=True, exist_ok=True)
        self._log("  ✓ Output directories created", Colors.GREEN)

        manifest_generator.generate_manifests(prr_dir, modules, config.prr_folder_name)
        write_manifest(prr_dir, modules, config.ides, __version__)
        self._log("  ✓ Manifests generated", Colors.GREEN)

        summary.ide_results = self.setup_ides(config, modules)

        if summary.ok:
            self._log("\n✨ PR Review installed successfully!", Colors.GREEN)
        else:
            self._log("\n⚠️  PR Review installed, but some IDEs could not be configured.", Colors.YELLOW)
        return summary

    def update(self, config: InstallConfig) -> InstallSummary:
        return self.install(replace(config, action_type="update"))

    def quick_update(self, config: InstallConfig) -> InstallSummary:
        """
        Reinstall with the modules and IDEs recorded in the existing manifest.

        Raises:
            ValueError: nothing is installed in config.project_dir
        """
        status = self.status(config.project_dir, config.prr_folder_name)
        if not status.installed:
            raise ValueError("PR Review is not installed in this directory.")
        saved = config_collector.load_configs(status.prr_dir)
        kept = {
            field_name: str(saved[key])
            for key, field_name in config_collector.SAVED_FIELDS.items()
            if saved.get(key) not in (None, "")
        }
        modules = [m for m in status.modules if m != "core"]
        return self.install(
            replace(config, modules=modules, ides=status.ides, action_type="quick-update", **kept)
        )

    def _resolve_modules(self, requested: List[str], summary: InstallSummary) -> List[str]:
        available = []
        for module in module_order(requested):
            if (self.source_dir / module).is_dir():
                available.append(module)
            else:
                summary.warnings.append(f"Module '{module}' not found, skipping")
                self._log(f"  ⚠️  Module '{module}' not found, skipping", Colors.YELLOW)
        if requested and not [m for m in available if m in requested]:
            raise ValueError(f"Unknown module(s): {', '.join(requested)}")
        return available

    def _copy_module(self, module: str, dest: Path) -> None:
        if dest.exists():
            shutil.rmtree(dest)
        shutil.copytree(self.source_dir / module, dest, ignore=shutil.ignore_patterns("__pycache__", "*.pyc"))

    def _compile_agents(
        self, prr_dir: Path, modules: List[str], config: InstallConfig, summary: InstallSummary
    ) -> int:
        answers = {
            "prr_folder": config.prr_folder_name,
            "user_name": config.user_name,
            "communication_language": config.communication_language,
        }
        prr_folder_name = config.prr_folder_name
        compiled = 0
        for module in modules:
            agents_dir = prr_dir / module / "agents"
            if not agents_dir.is_dir():
                continue
            for source in sorted(agents_dir.glob(f"*{AGENT_SOURCE_SUFFIX}")):
                try:
                    compile_agent_file(source, module, answers, prr_folder_name)
                    compiled += 1
                except (yaml.YAMLError, ValueError, OSError) as e:
                    summary.warnings.append(f"Could not compile agent {source.name}: {e}")
                    self._log(f"  ⚠️  Could not compile agent {source.name}: {e}", Colors.YELLOW)
        return compiled

    def setup_ides(self, config: InstallConfig, modules: List[str]) -> List[DispatchResult]:
        self.registry.set_prr_folder_name(config.prr_folder_name)
        options = SetupOptions(
            selected_modules=modules,
            install_location=config.install_location,
            verbose=self.verbose,
        )
        results = []
        for ide in config.ides:
            result = self.registry.setup(ide, config.project_dir, config.prr_dir, options)
            if result.success:
                self._log(f"  ✓ {ide} configured ({result.detail or 'done'})", Colors.GREEN)
            else:
                self._log(f"  ✗ {ide}: {result.error}", Colors.RED)
            results.append(result)
        return results

    # ---- uninstall / status ----

    def uninstall(self, project_dir: Path, prr_folder_name: str = PRR_FOLDER_NAME) -> List[DispatchResult]:
        """Remove launchers for every IDE, then the artifacts folder."""
        self.registry.set_prr_folder_name(prr_folder_name)
        results = self.registry.cleanup_all(project_dir, SetupOptions(is_uninstall=True, verbose=self.verbose))
        for result in results:
            if not result.success:
                self._log(f"  ✗ {result.ide}: {result.error}", Colors.RED)

        prr_dir = project_dir / prr_folder_name
        if prr_dir.exists():
            shutil.rmtree(prr_dir)
            self._log(f"  ✓ Removed {prr_folder_name}/", Colors.GREEN)
        return results

    def status(self, project_dir: Path, prr_folder_name: str = PRR_FOLDER_NAME) -> InstallationStatus:
        return detect(project_dir, prr_folder_name)
