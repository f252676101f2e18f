"""Upstream weather sources."""

from ari_wx.sources.avwx import AvWxSource, FetchResult, FetchErrorKind

__all__ = ['AvWxSource', 'FetchResult', 'FetchErrorKind']
