"""
Init scripts applied to every document the browser renderer opens
"""

import json

from ..config import FingerprintOverrides

# WebGLRenderingContext.getParameter enums for UNMASKED_VENDOR_WEBGL / UNMASKED_RENDERER_WEBGL
UNMASKED_VENDOR_WEBGL = 37445
UNMASKED_RENDERER_WEBGL = 37446

_PERMISSIONS_QUERY = """
(() => {
    const originalQuery = window.navigator.permissions.query;
    window.navigator.permissions.query = (parameters) => (
        parameters.name === 'notifications'
            ? Promise.resolve({ state: Notification.permission })
            : originalQuery(parameters)
    );
})();
"""

_WEBDRIVER = """
Object.defineProperty(navigator, 'webdriver', {
    get: () => false,
});
"""

_WEBGL = """
(() => {
    const vendor = %(vendor)s;
    const renderer = %(renderer)s;
    const patch = (proto) => {
        const getParameter = proto.getParameter;
        proto.getParameter = function(parameter) {
            if (parameter === %(vendor_enum)d && vendor !== null) {
                return vendor;
            }
            if (parameter === %(renderer_enum)d && renderer !== null) {
                return renderer;
            }
            return getParameter.call(this, parameter);
        };
    };
    patch(WebGLRenderingContext.prototype);
    if (typeof WebGL2RenderingContext !== 'undefined') {
        patch(WebGL2RenderingContext.prototype);
    }
})();
"""

_PLUGINS = """
(() => {
    const mockPlugins = %(plugins)s;
    Object.defineProperty(navigator, 'plugins', {
        get: () => mockPlugins,
    });
    Object.defineProperty(navigator, 'mimeTypes', {
        get: () => mockPlugins.map(plugin => ({
            type: 'application/pdf',
            suffixes: 'pdf',
            description: 'Portable Document Format',
            enabledPlugin: plugin,
        })),
    });
})();
"""


def build_init_script(fingerprint: FingerprintOverrides) -> str:
    """Build one script applying every enabled override"""
    parts = []

    if fingerprint.patch_permissions_query:
        parts.append(_PERMISSIONS_QUERY)

    if fingerprint.hide_webdriver:
        parts.append(_WEBDRIVER)

    if fingerprint.webgl_vendor is not None or fingerprint.webgl_renderer is not None:
        parts.append(_WEBGL % {
            'vendor': json.dumps(fingerprint.webgl_vendor),
            'renderer': json.dumps(fingerprint.webgl_renderer),
            'vendor_enum': UNMASKED_VENDOR_WEBGL,
            'renderer_enum': UNMASKED_RENDERER_WEBGL,
        })

    if fingerprint.plugins:
        plugins = [
            {'name': p.name, 'filename': p.filename, 'description': p.description}
            for p in fingerprint.plugins
        ]
        parts.append(_PLUGINS % {'plugins': json.dumps(plugins)})

    return "\n".join(part.strip() for part in parts)
