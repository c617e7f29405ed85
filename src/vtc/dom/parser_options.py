"""Tag tables and tokenizer hooks for HTML templates."""

from __future__ import annotations

import html

from vtc.ast import ElementNode
from vtc.parser import TextMode


def _tag_set(tags: str) -> frozenset[str]:
	return frozenset(tags.split(","))


HTML_TAGS = _tag_set(
	"html,body,base,head,link,meta,style,title,address,article,aside,footer,"
	"header,hgroup,h1,h2,h3,h4,h5,h6,nav,section,div,dd,dl,dt,figcaption,"
	"figure,picture,hr,img,li,main,ol,p,pre,ul,a,b,abbr,bdi,bdo,br,cite,code,"
	"data,dfn,em,i,kbd,mark,q,rp,rt,ruby,s,samp,small,span,strong,sub,sup,"
	"time,u,var,wbr,area,audio,map,track,video,embed,object,param,source,"
	"canvas,script,noscript,del,ins,caption,col,colgroup,table,thead,tbody,td,"
	"th,tr,button,datalist,fieldset,form,input,label,legend,meter,optgroup,"
	"option,output,progress,select,textarea,details,dialog,menu,"
	"summary,template,blockquote,iframe,tfoot,search"
)

SVG_TAGS = _tag_set(
	"svg,animate,animateMotion,animateTransform,circle,clipPath,color-profile,"
	"defs,desc,discard,ellipse,feBlend,feColorMatrix,feComponentTransfer,"
	"feComposite,feConvolveMatrix,feDiffuseLighting,feDisplacementMap,"
	"feDistantLight,feDropShadow,feFlood,feFuncA,feFuncB,feFuncG,feFuncR,"
	"feGaussianBlur,feImage,feMerge,feMergeNode,feMorphology,feOffset,"
	"fePointLight,feSpecularLighting,feSpotLight,feTile,feTurbulence,filter,"
	"foreignObject,g,hatch,hatchpath,image,line,linearGradient,marker,mask,"
	"mesh,meshgradient,meshpatch,meshrow,metadata,mpath,path,pattern,"
	"polygon,polyline,radialGradient,rect,set,solidcolor,stop,switch,symbol,"
	"text,textPath,title,tspan,unknown,use,view"
)

MATH_TAGS = _tag_set(
	"annotation,annotation-xml,maction,maligngroup,malignmark,math,menclose,"
	"merror,mfenced,mfrac,mfraction,mglyph,mi,mlabeledtr,mlongdiv,"
	"mmultiscripts,mn,mo,mover,mpadded,mphantom,mprescripts,mroot,mrow,ms,"
	"mscarries,mscarry,msgroup,msline,mspace,msqrt,msrow,mstack,mstyle,msub,"
	"msubsup,msup,mtable,mtd,mtext,mtr,munder,munderover,none,semantics"
)

VOID_TAGS = _tag_set("area,base,br,col,embed,hr,img,input,link,meta,param,source,track,wbr")

_RCDATA_TAGS = frozenset({"textarea", "title"})
_RAWTEXT_TAGS = frozenset({"style", "xmp", "iframe", "noembed", "noframes", "script", "noscript"})


def is_html_tag(tag: str) -> bool:
	return tag in HTML_TAGS


def is_svg_tag(tag: str) -> bool:
	return tag in SVG_TAGS


def is_math_ml_tag(tag: str) -> bool:
	return tag in MATH_TAGS


def is_native_tag(tag: str) -> bool:
	return tag in HTML_TAGS or tag in SVG_TAGS or tag in MATH_TAGS


def is_void_tag(tag: str) -> bool:
	return tag in VOID_TAGS


def is_pre_tag(tag: str) -> bool:
	return tag == "pre"


def decode_html(raw: str) -> str:
	return html.unescape(raw)


def get_text_mode(element: ElementNode, parent: ElementNode | None) -> TextMode:
	# inside <svg> and <math> every tag is regular markup
	if parent is not None and (parent.tag in SVG_TAGS or parent.tag in MATH_TAGS):
		return TextMode.DATA
	if element.tag in _RCDATA_TAGS:
		return TextMode.RCDATA
	if element.tag in _RAWTEXT_TAGS:
		return TextMode.RAWTEXT
	return TextMode.DATA
