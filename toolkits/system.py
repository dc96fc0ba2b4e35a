import platform


class Sys:
    """Information about the machine the interpreter runs on."""

    @staticmethod
    def arch() -> str:
        """Machine type, e.g. 'x86_64' or 'arm64'."""
        return platform.machine()

    @staticmethod
    def os() -> str:
        """Operating system name, e.g. 'Linux', 'Darwin' or 'Windows'."""
        return platform.system()

    @staticmethod
    def hostname() -> str:
        return platform.node()
