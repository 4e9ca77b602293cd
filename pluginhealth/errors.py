"""Exception hierarchy shared by the engine, the collaborators and the CLI."""


class PluginHealthError(Exception):
    """Base class for all errors raised by pluginhealth."""


class ContextConflictError(PluginHealthError):
    """A probe tried to publish a value contradicting one already in the context."""


class ProbeConfigurationError(PluginHealthError):
    """The registered probes cannot be ordered (duplicate key or requirement cycle)."""


class GitHubError(PluginHealthError, OSError):
    """The GitHub API could not be reached or answered with an error.

    ``status_code`` is set when GitHub answered with an HTTP error.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class GitError(PluginHealthError, OSError):
    """A git command failed or timed out."""


class DescriptorError(PluginHealthError):
    """A build descriptor (pom.xml) could not be parsed."""


class UpdateCenterError(PluginHealthError, OSError):
    """The update-center data could not be fetched or decoded."""


class JiraError(PluginHealthError, OSError):
    """The Jira API could not be reached or rejected the query."""
