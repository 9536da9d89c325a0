"""archmap: architecture graph, progress and Gherkin feature tracker."""

__version__ = "0.4.0"
