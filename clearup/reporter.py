"""
Report generation for ClearUp
"""
import csv
import json
from datetime import datetime
from pathlib import Path
from typing import List

from jinja2 import Environment

from .classifier import CleanLevel, classify_cleanliness, file_type
from .config import Config
from .models import MatchRecord
from .utils import format_date, format_file_size


HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>ClearUp Report</title>
    <style>
        body { font-family: Arial, sans-serif; margin: 20px; }
        .header { background: #2c3e50; color: white; padding: 20px; border-radius: 5px; }
        .summary { background: #ecf0f1; padding: 15px; border-radius: 5px; margin: 20px 0; }
        table { border-collapse: collapse; width: 100%; }
        th, td { border-bottom: 1px solid #bdc3c7; padding: 6px 10px; text-align: left; }
        th { background: #3498db; color: white; }
        .level-safe { color: #10b981; font-weight: bold; }
        .level-caution { color: #f59e0b; font-weight: bold; }
        .level-danger { color: #ef4444; font-weight: bold; }
        .level-unknown { color: #94a3b8; font-weight: bold; }
    </style>
</head>
<body>
    <div class="header">
        <h1>🧹 ClearUp Large File Report</h1>
        <p>Generated: {{ timestamp }}</p>
    </div>

    <div class="summary">
        <h2>📊 Summary</h2>
        <ul>
            <li><strong>Scan Path:</strong> {{ scan_path }}</li>
            <li><strong>Threshold:</strong> {{ threshold | format_size }}</li>
            <li><strong>Files Found:</strong> {{ rows | length }}</li>
            <li><strong>Total Size:</strong> {{ total_size | format_size }}</li>
            {% for level, count in level_counts %}
            <li><strong>{{ level.label }}:</strong> {{ count }}</li>
            {% endfor %}
        </ul>
    </div>

    <h2>📁 Files</h2>
    <table>
        <tr><th>Name</th><th>Size</th><th>Modified</th><th>Type</th><th>Advice</th><th>Path</th></tr>
        {% for row in rows %}
        <tr>
            <td>{{ row.match.name }}</td>
            <td>{{ row.match.size_bytes | format_size }}</td>
            <td>{{ row.match.modified_at_millis | format_date }}</td>
            <td>{{ row.type }}</td>
            <td class="level-{{ row.advice.level.level_id }}">{{ row.advice.level.label }}</td>
            <td>{{ row.match.path }}</td>
        </tr>
        {% endfor %}
    </table>
</body>
</html>
"""

MARKDOWN_TEMPLATE = """# 🧹 ClearUp Large File Report

**Generated:** {{ timestamp }}
**Scan Path:** {{ scan_path }}
**Threshold:** {{ threshold | format_size }}

## 📊 Summary

- **Files Found:** {{ rows | length }}
- **Total Size:** {{ total_size | format_size }}
{% for level, count in level_counts %}- **{{ level.label }}:** {{ count }}
{% endfor %}
## 📁 Files

{% for row in rows %}### {{ loop.index }}. {{ row.match.name }}

**Path:** `{{ row.match.path }}`
**Size:** {{ row.match.size_bytes | format_size }}
**Modified:** {{ row.match.modified_at_millis | format_date }}
**Advice:** {{ row.advice.level.label }} ({{ row.advice.rationale }})

---

{% endfor %}"""

CSV_HEADER = ['name', 'size', 'size_readable', 'modified', 'type', 'advice', 'path']


class ReportGenerator:
    """Generates reports from scan matches"""

    def __init__(self, config: Config):
        self.config = config

    def _environment(self, autoescape: bool) -> Environment:
        env = Environment(autoescape=autoescape)
        env.filters['format_size'] = format_file_size
        env.filters['format_date'] = format_date
        return env

    def generate_report(self, matches: List[MatchRecord]) -> str:
        """Generate report based on matches and format"""

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        report_name = f"clearup_report_{timestamp}"

        if self.config.report_format == 'html':
            return self._render(HTML_TEMPLATE, matches, report_name, 'html')
        elif self.config.report_format == 'markdown':
            return self._render(MARKDOWN_TEMPLATE, matches, report_name, 'md')
        elif self.config.report_format == 'json':
            return self._generate_json_report(matches, report_name)
        elif self.config.report_format == 'csv':
            return self._generate_csv_report(matches, report_name)
        else:
            raise ValueError(f"Unsupported report format: {self.config.report_format}")

    def _rows(self, matches: List[MatchRecord]) -> List[dict]:
        rows = [
            {'match': m, 'type': file_type(m.name), 'advice': classify_cleanliness(m.path)}
            for m in matches
        ]
        rows.sort(key=lambda r: r['match'].size_bytes, reverse=True)
        return rows

    def _render(self, source: str, matches: List[MatchRecord], report_name: str, ext: str) -> str:
        rows = self._rows(matches)
        level_counts = [
            (level, sum(1 for r in rows if r['advice'].level is level))
            for level in CleanLevel
        ]
        content = self._environment(ext == 'html').from_string(source).render(
            timestamp=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            scan_path=self.config.scan_path,
            threshold=self.config.threshold_bytes,
            rows=rows,
            total_size=sum(m.size_bytes for m in matches),
            level_counts=level_counts,
        )
        report_path = Path(self.config.output_dir) / f"{report_name}.{ext}"
        report_path.write_text(content, encoding='utf-8')
        return str(report_path)

    def _generate_json_report(self, matches: List[MatchRecord], report_name: str) -> str:
        """Generate JSON report"""

        report_data = {
            'report_info': {
                'generated_at': datetime.now().isoformat(),
                'scan_path': self.config.scan_path,
                'threshold_bytes': self.config.threshold_bytes,
                'total_items': len(matches),
            },
            'results': [
                dict(row['match'].to_dict(), type=row['type'], advice=row['advice'].to_dict())
                for row in self._rows(matches)
            ]
        }

        report_path = Path(self.config.output_dir) / f"{report_name}.json"
        report_path.write_text(json.dumps(report_data, indent=2), encoding='utf-8')
        return str(report_path)

    def _generate_csv_report(self, matches: List[MatchRecord], report_name: str) -> str:
        report_path = Path(self.config.output_dir) / f"{report_name}.csv"
        with open(report_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(CSV_HEADER)
            for row in self._rows(matches):
                m = row['match']
                writer.writerow([
                    m.name,
                    m.size_bytes,
                    format_file_size(m.size_bytes),
                    format_date(m.modified_at_millis),
                    row['type'],
                    row['advice'].level.level_id,
                    m.path,
                ])
        return str(report_path)
