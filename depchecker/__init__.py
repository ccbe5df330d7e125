"""depchecker: report outdated NuGet dependencies of .NET projects."""

__version__ = "0.1.0"
