"""Remediation knowledge base keyed by fragments of criterion labels."""

from __future__ import annotations

from typing import Dict, Tuple

# Evaluated top to bottom; the first fragment contained in the label wins.
REMEDIATION_KB: Tuple[Tuple[str, Dict[str, str]], ...] = (
    # Arabic, year 2
    ("فك ترميز", {
        "origin": "السنة الأولى (المقاطع 1-4)",
        "cause": "عدم تثبيت الحروف وعلاقتها بالأصوات (الوعي الصوتي) في السنة الأولى.",
        "activity": "ألعاب الوعي الصوتي، العجين لتشكيل الحروف، لوحة الحروف المتحركة.",
    }),
    ("وحدات لغوية", {
        "origin": "السنة الأولى (نهاية السنة)",
        "cause": "ضعف في القراءة الإجمالية للكلمات البسيطة، تعثر في الانتقال من التهجئة إلى الاسترسال.",
        "activity": "قراءة البطاقات الخاطفة، القراءة الثنائية، النصوص القصيرة المشكولة.",
    }),
    ("المعاني الصريحة", {
        "origin": "السنة الأولى (فهم المنطوق)",
        "cause": "التركيز سابقاً على فك الرمز (القراءة الآلية) إهمال جانب المعنى والفهم.",
        "activity": "استخراج المعلومات من صور، الإجابة عن أسئلة (من؟ أين؟) بعد سماع قصة.",
    }),
    ("الرسم الإملائي", {
        "origin": "السنة الأولى (الكتابة)",
        "cause": "عدم التمييز بين الحروف المتشابهة سمعياً أو بصرياً.",
        "activity": "الإملاء المنظور، املأ الفراغ بالحرف الناقص.",
    }),
    # Mathematics, year 2
    ("نظام العد", {
        "origin": "السنة الأولى (الأعداد إلى 99)",
        "cause": "خلل في مفهوم \"المراتب\" (وحدات/عشرات) وعدم إدراك قيمة الرقم حسب موقعه.",
        "activity": "استعمال المعداد، جداول المراتب، حزم الخشيبات (التجميع والاستبدال).",
    }),
    ("الجمع والطرح", {
        "origin": "السنة الأولى (الجمع دون احتفاظ)",
        "cause": "عدم التمكن من الشريط العددي، أو عدم استيعاب مفهوم \"الإضافة\" و\"الإنقاص\" بالمحسوس.",
        "activity": "الحساب الذهني اليومي، استعمال البطاقات، تمثيل العمليات بأشياء ملموسة.",
    }),
    ("فهم المشكلة", {
        "origin": "السنة الأولى (وضعيات جمعية)",
        "cause": "صعوبة لغوية في قراءة نص المشكلة، أو عدم القدرة على استخراج المعطيات.",
        "activity": "تلوين المعطيات بالأخضر والمطلوب بالأحمر، تمثيل المشكلة برسم.",
    }),
    ("انسجام عناصر", {
        "origin": "السنة الأولى",
        "cause": "الخلط بين المعنى الرياضي للجمع (الزيادة) والطرح (النقصان).",
        "activity": "مسرحة الوضعيات، لعب الأدوار (بائع ومشتري).",
    }),
)

FALLBACK_REMEDIATION: Dict[str, str] = {
    "origin": "السنة السابقة",
    "cause": "نقص في المكتسبات القبلية الأساسية.",
    "activity": "أنشطة تفريد التعلم والمعالجة البيداغوجية.",
}


def lookup_remediation(label: str) -> Dict[str, str]:
    """Return origin / cause / activity texts for a criterion *label*."""

    label = str(label or "")
    for fragment, entry in REMEDIATION_KB:
        if fragment in label:
            return dict(entry)
    return dict(FALLBACK_REMEDIATION)
