# su_mcp/report_generator.py
"""Report generator for shader usage scans.

Writes JSON and Markdown reports of a ProfileIndex together with the issues
the detectors raised for it.
"""
import json
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from su_mcp.config import OutputConfig
from su_mcp.models import Issue, ProfileIndex


def _calculate_stats(values: List[int]) -> Dict[str, float]:
    """Calculate statistical summary for a list of values."""
    if not values:
        return {"count": 0, "min": 0, "max": 0, "mean": 0, "median": 0, "total": 0}

    sorted_vals = sorted(values)
    n = len(sorted_vals)
    total = sum(sorted_vals)

    if n % 2 == 0:
        median = (sorted_vals[n//2 - 1] + sorted_vals[n//2]) / 2
    else:
        median = sorted_vals[n//2]

    return {
        "count": n,
        "min": sorted_vals[0],
        "max": sorted_vals[-1],
        "mean": total / n,
        "median": median,
        "total": total,
    }


class ReportGenerator:
    """Generates scan reports in JSON and Markdown."""

    def __init__(self, project_path: str, index: ProfileIndex, issues: List[Issue],
                 output: Optional[OutputConfig] = None):
        """Initialize the report generator.

        Args:
            project_path: Path of the scanned project
            index: Profile snapshot from the scan
            issues: Issues raised by detectors for the snapshot
            output: Optional output options
        """
        self.project_path = project_path
        self.index = index
        self.issues = issues
        self.output = output or OutputConfig()
        self.timestamp = datetime.now()

    def generate_report_data(self) -> Dict[str, Any]:
        """Generate structured report data.

        Returns:
            Dictionary containing the full scan result
        """
        shaders = self.index.to_records()
        if not self.output.include_materials:
            for record in shaders:
                record["materials"] = len(record["materials"])

        return {
            "meta": {
                "project": str(self.project_path),
                "scan_time": self.timestamp.isoformat(),
            },
            "summary": self._generate_summary_data(),
            "issues": [issue.model_dump(mode="json") for issue in self.issues],
            "shaders": shaders,
        }

    def _generate_summary_data(self) -> Dict[str, Any]:
        profiles = list(self.index.values())
        return {
            "unique_shaders": len(self.index),
            "material_references": self.index.material_count,
            "shading_models": dict(Counter(p.shading_model.value for p in profiles)),
            "precisions": dict(Counter(p.precision.value for p in profiles)),
            "instruction_count": _calculate_stats([p.instruction_count for p in profiles]),
            "texture_samples": _calculate_stats([p.texture_sample_count for p in profiles]),
        }

    def _file_stem(self) -> str:
        name = Path(self.project_path).name or "project"
        return f"{name}_shader_usage_{self.timestamp.strftime('%Y%m%d_%H%M%S')}"

    def save_json(self, output_path: Path) -> Path:
        """Save report as JSON file.

        Args:
            output_path: Directory to save the report

        Returns:
            Path to the generated JSON file
        """
        output_path = Path(output_path)
        output_path.mkdir(parents=True, exist_ok=True)
        json_file = output_path / f"{self._file_stem()}.json"

        with open(json_file, 'w', encoding='utf-8') as f:
            json.dump(self.generate_report_data(), f, indent=2, ensure_ascii=False)

        return json_file

    def save_markdown(self, output_path: Path) -> Path:
        """Save report as Markdown file.

        Args:
            output_path: Directory to save the report

        Returns:
            Path to the generated Markdown file
        """
        output_path = Path(output_path)
        output_path.mkdir(parents=True, exist_ok=True)
        md_file = output_path / f"{self._file_stem()}.md"

        with open(md_file, 'w', encoding='utf-8') as f:
            f.write('\n'.join(self.generate_markdown_lines()))

        return md_file

    def save_all(self, output_path: Path) -> Dict[str, Path]:
        """Save both JSON and Markdown reports.

        Returns:
            Dictionary with 'json' and 'markdown' keys containing file paths
        """
        return {
            "json": self.save_json(output_path),
            "markdown": self.save_markdown(output_path)
        }

    def generate_markdown_lines(self) -> List[str]:
        lines = []
        lines.extend(self._md_header())
        lines.extend(self._md_summary())
        lines.extend(self._md_issues())
        lines.extend(self._md_shaders())
        return lines

    def _md_header(self) -> List[str]:
        return [
            "# Shader Usage Report",
            "",
            f"> **Generated**: {self.timestamp.strftime('%Y-%m-%d %H:%M:%S')}",
            f"> **Project**: `{self.project_path}`",
            "",
            "---",
            ""
        ]

    def _md_summary(self) -> List[str]:
        summary = self._generate_summary_data()
        lines = [
            "## Summary",
            "",
            "| Metric | Value |",
            "|--------|-------|",
            f"| Unique Shaders | {summary['unique_shaders']:,} |",
            f"| Material References | {summary['material_references']:,} |",
        ]
        stats = summary["instruction_count"]
        if stats["count"]:
            lines.append(f"| Instructions (mean / max) | {stats['mean']:.1f} / {stats['max']} |")
        for model, count in sorted(summary["shading_models"].items()):
            lines.append(f"| Shader Model {model} | {count} |")
        lines.append("")
        return lines

    def _md_issues(self) -> List[str]:
        lines = [f"## Issues Found: {len(self.issues)}", ""]
        for issue in self.issues:
            lines.append(f"- **{issue.type}**: {issue.description}")
            lines.append(f"  - Location: `{issue.location}`")
        lines.append("")
        return lines

    def _md_shaders(self) -> List[str]:
        lines = [
            "## Shaders",
            "",
            "| Shader | Model | Precision | Instructions | Texture Samples | Materials |",
            "|--------|-------|-----------|--------------|-----------------|-----------|",
        ]
        for shader, profile in self.index.items():
            lines.append(
                f"| {shader.name} | {profile.shading_model.value} | {profile.precision.value} "
                f"| {profile.instruction_count} | {profile.texture_sample_count} "
                f"| {len(profile.materials)} |"
            )
        lines.append("")

        if self.output.include_materials:
            for shader, profile in self.index.items():
                lines.append(f"### {shader.name}")
                lines.append("")
                for material in profile.materials:
                    lines.append(f"- {material.name} (`{material.asset_path}`)")
                lines.append("")
        return lines
