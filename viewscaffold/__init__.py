"""viewscaffold -- Razor view scaffolding driven by C# model classes.

Scans C# model source text to recover typed property metadata and renders
ASP.NET Core MVC views (list, create, edit, details, delete) from it.
"""

__version__ = "0.3.0"
