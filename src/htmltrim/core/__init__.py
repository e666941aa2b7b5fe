from htmltrim.core.models import RewriteRule, Shield, TrimStats

__all__ = ['RewriteRule', 'Shield', 'TrimStats']
