"""
Flask Web API for 42-c-format

This module serves the formatter to editors and tools over HTTP: whole
document and range formatting, checking, and project scans.
"""

import os
import logging
from typing import Any, Dict, Optional
from datetime import datetime

from flask import Flask, request, jsonify
from flask_cors import CORS

from ..core.config import NormConfig, NormFormatterError
from ..core.pipeline import FormatPipeline
from ..core.scanner import SourceScanner
from ..core.aggregator import FileAggregator

logger = logging.getLogger(__name__)


class FormatterDashboard:
    """Holds the configured pipeline and the last project scan."""

    def __init__(self, config: Optional[NormConfig] = None):
        self.config = config or NormConfig()
        self.aggregator = FileAggregator()

    def pipeline_for(self, overrides: Optional[Dict[str, Any]]) -> FormatPipeline:
        if not overrides:
            return FormatPipeline(self.config)
        merged = dict(self.config.to_dict(), **overrides)
        return FormatPipeline(NormConfig.from_dict(merged))

    def scan_project(self, project_path: str) -> Dict[str, Any]:
        """
        Check every C file under a project directory.

        Args:
            project_path: Path to the project directory

        Returns:
            Dictionary with the report and scan time
        """
        scanner = SourceScanner(self.config)
        self.aggregator = FileAggregator()

        for result in scanner.scan_directory(project_path, recursive=True):
            self.aggregator.add_scan_result(result)

        report = self.aggregator.export_report()
        report.update({
            'success': True,
            'project_path': project_path,
            'scan_time': datetime.now().isoformat(),
        })
        return report


def _payload() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def create_app(config: Optional[NormConfig] = None):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    CORS(app)

    dashboard = FormatterDashboard(config)
    app.config['DASHBOARD'] = dashboard

    @app.route('/api/health')
    def api_health():
        return jsonify({'success': True, 'config': dashboard.config.to_dict()})

    @app.route('/api/format', methods=['POST'])
    def api_format():
        """Format a document; an optional range still returns the whole document."""
        data = _payload()
        text = data.get('text')
        if not isinstance(text, str):
            return jsonify({'success': False, 'error': 'text is required'}), 400

        try:
            pipeline = dashboard.pipeline_for(data.get('config'))
            text_range = data.get('range')
            if text_range:
                result = pipeline.run_range(text, int(text_range.get('start_line', 1)),
                                            int(text_range.get('end_line', 1)))
            else:
                result = pipeline.run(text)
        except (NormFormatterError, TypeError, ValueError, AttributeError) as e:
            return jsonify({'success': False, 'error': str(e)}), 400

        response = result.to_dict()
        response['success'] = True
        return jsonify(response)

    @app.route('/api/check', methods=['POST'])
    def api_check():
        data = _payload()
        text = data.get('text')
        if not isinstance(text, str):
            return jsonify({'success': False, 'error': 'text is required'}), 400

        try:
            scanner = SourceScanner(dashboard.pipeline_for(data.get('config')).config)
        except (NormFormatterError, TypeError) as e:
            return jsonify({'success': False, 'error': str(e)}), 400

        diagnostics = scanner.check_text(text)
        return jsonify({'success': True, 'diagnostics': [d.to_dict() for d in diagnostics]})

    @app.route('/api/scan', methods=['POST'])
    def api_scan():
        project_path = _payload().get('project_path')

        if not project_path:
            return jsonify({'success': False, 'error': 'Project path is required'}), 400

        if not os.path.isdir(project_path):
            return jsonify({'success': False, 'error': 'Project path does not exist'}), 400

        return jsonify(dashboard.scan_project(project_path))

    @app.route('/api/recommendations')
    def api_recommendations():
        return jsonify({
            'success': True,
            'recommendations': dashboard.aggregator.get_recommendations()
        })

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'success': False, 'error': 'Endpoint not found'}), 404

    @app.errorhandler(500)
    def internal_error(error):
        logger.error(f"Internal server error: {error}")
        return jsonify({'success': False, 'error': 'Internal server error'}), 500

    return app


if __name__ == '__main__':
    create_app().run()
