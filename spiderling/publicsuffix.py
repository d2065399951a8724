"""Public suffix lookup over a built-in subset of the public suffix list.

Labels not covered by a rule fall back to the default rule, under which
the last label is the public suffix.
"""

from __future__ import annotations

_RULES = frozenset(
    """
    co.uk org.uk ac.uk gov.uk ltd.uk plc.uk me.uk net.uk nhs.uk police.uk sch.uk
    com.au net.au org.au edu.au gov.au asn.au id.au
    co.jp ne.jp or.jp ac.jp go.jp ad.jp ed.jp gr.jp lg.jp
    co.in net.in org.in gen.in firm.in ind.in ac.in edu.in gov.in
    co.nz net.nz org.nz govt.nz ac.nz school.nz geek.nz
    com.br net.br org.br gov.br edu.br
    com.cn net.cn org.cn gov.cn edu.cn ac.cn
    com.tw net.tw org.tw edu.tw gov.tw
    com.hk net.hk org.hk edu.hk gov.hk
    com.sg net.sg org.sg edu.sg gov.sg
    com.mx net.mx org.mx gob.mx edu.mx
    com.ar net.ar org.ar gob.ar
    co.za net.za org.za gov.za ac.za
    co.kr or.kr ne.kr go.kr ac.kr
    com.tr net.tr org.tr gov.tr edu.tr
    com.ru net.ru org.ru
    com.ua net.ua org.ua
    co.il org.il net.il ac.il gov.il
    com.pl net.pl org.pl
    co.id or.id ac.id go.id web.id
    com.my net.my org.my gov.my edu.my
    co.th or.th ac.th go.th in.th
    com.vn net.vn org.vn
    com.ph net.ph org.ph
    com.pk net.pk org.pk
    com.eg com.sa com.ng com.co com.pe com.ve com.ec
    co.at or.at ac.at gv.at
    appspot.com blogspot.com herokuapp.com cloudfront.net azurewebsites.net
    github.io gitlab.io netlify.app vercel.app pages.dev workers.dev
    firebaseapp.com web.app s3.amazonaws.com elasticbeanstalk.com
    """.split()
)

_WILDCARD_PARENTS = frozenset({"ck", "bd", "er", "fk", "jm", "kh", "mm", "np", "pg"})

_EXCEPTIONS = frozenset({"www.ck"})


def public_suffix(domain: str) -> str:
    """Return the public suffix of a domain."""
    labels = domain.split(".")
    lowered = [label.lower() for label in labels]
    for index in range(len(labels)):
        candidate = ".".join(lowered[index:])
        if candidate in _EXCEPTIONS:
            return ".".join(labels[index + 1:])
        if candidate in _RULES:
            return ".".join(labels[index:])
        if index + 1 < len(labels) and ".".join(lowered[index + 1:]) in _WILDCARD_PARENTS:
            return ".".join(labels[index:])
    return labels[-1]


def effective_tld_plus_one(domain: str) -> str:
    """Return the public suffix plus one more label.

    Raises ValueError for domains with empty labels or no registrable part.
    """
    if domain.startswith(".") or domain.endswith(".") or ".." in domain:
        raise ValueError(f"publicsuffix: empty label in domain {domain!r}")
    suffix = public_suffix(domain)
    if len(domain) <= len(suffix):
        raise ValueError(f"publicsuffix: cannot derive eTLD+1 for domain {domain!r}")
    index = len(domain) - len(suffix) - 1
    if domain[index] != ".":
        raise ValueError(f"publicsuffix: invalid public suffix {suffix!r} for domain {domain!r}")
    return domain[domain.rfind(".", 0, index) + 1:]