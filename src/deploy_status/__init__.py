"""Track Vercel and Netlify deployment status from the terminal."""

__version__ = "0.1.0"
