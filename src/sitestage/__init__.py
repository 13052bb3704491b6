"""Sitestage - static site compiler for content trees and Jinja2 layouts."""

__version__ = "0.1.0"
