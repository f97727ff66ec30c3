"""
Results query services used to annotate current and baseline builds.

A query service receives the scenario name, the configuration name and the
two builds to annotate. It sets `failure`, `comment` and `summary_kind` on
the builds in place.
"""

import json
from pathlib import Path


class ResultsQuery:
    """Interface of a results query service."""

    def query_scenario_failures(self, scenario_name, config_name, current, baseline):
        """Set failure messages and comments on the current and baseline builds."""
        raise NotImplementedError

    def query_scenario_summaries(self, scenario_name, config_name, current, baseline):
        """Set the summary kind on the current and baseline builds."""
        raise NotImplementedError


class JsonResultsQuery(ResultsQuery):
    """
    Query service backed by an annotations JSON file:

        {
          "failures":  {"<config>": {"<build>": "message"}},
          "comments":  {"<config>": {"<build>": "comment"}},
          "summaries": {"<config>": {"<build>": 0}}
        }

    Entries may also be keyed by "<scenario>/<config>" to target a single
    scenario; those take precedence.
    """

    def __init__(self, annotations):
        self.annotations = annotations

    @classmethod
    def load(cls, path):
        with open(Path(path), "r") as f:
            return cls(json.load(f))

    def _lookup(self, section, scenario_name, config_name, build):
        entries = self.annotations.get(section, {})
        for key in (f"{scenario_name}/{config_name}", config_name):
            builds = entries.get(key)
            if builds and build.get_name() in builds:
                return builds[build.get_name()]
        return None

    def query_scenario_failures(self, scenario_name, config_name, current, baseline):
        for build in (current, baseline):
            failure = self._lookup("failures", scenario_name, config_name, build)
            if failure is not None:
                build.failure = failure
            comment = self._lookup("comments", scenario_name, config_name, build)
            if comment is not None:
                build.comment = comment

    def query_scenario_summaries(self, scenario_name, config_name, current, baseline):
        for build in (current, baseline):
            kind = self._lookup("summaries", scenario_name, config_name, build)
            if kind is not None:
                build.summary_kind = int(kind)
