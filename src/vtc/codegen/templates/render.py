from mako.template import Template

# `helpers` holds ready-made specifiers (`name as _name` / `name: _name`);
# `body` is the indented render function body.
RENDER_MODULE_TEMPLATE = Template(
	"""\
% if mode == "module":
% if helpers:
import { ${", ".join(helpers)} } from "${runtime_module_name}"
% endif
% else:
const _Vue = ${runtime_global_name}
% if helpers:
const { ${", ".join(helpers)} } = _Vue
% endif
% endif
% for i, hoist in enumerate(hoists):
% if i == 0:

% endif
const _hoisted_${i + 1} = ${hoist}
% endfor

${"export" if mode == "module" else "return"} function render(_ctx, _cache) {
% if with_block:
  with (_ctx) {
% endif
${body}
% if with_block:
  }
% endif
}
"""
)
