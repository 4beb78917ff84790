"""Launchpad -- bootstrap a new web project from a template.

Copies a starter template, personalises its manifest, installs dependencies
with npm, pnpm, yarn or bun, and optionally links the project to GitHub and
deploys it to Netlify or Cloudflare Pages.
"""

__version__ = "0.1.0"
