"""
Static dashboard menu definitions.

One locale-agnostic tree describes structure and access rules; labels live in
LABELS keyed by node id, so the English, Arabic and Urdu sidebars can never
drift apart structurally.

Adding a new page:
  1. Add an entry to DASHBOARD_MENU (id, path, roles and/or permissions)
  2. Add its label to every locale in LABELS
  3. Give it feature_flags if it ships behind a flag
"""

from functools import lru_cache
from typing import Dict, Tuple

from sabq.errors import NavigationError
from sabq.menu import DEFAULT_MAX_DEPTH, MenuNode, build_menu

SUPPORTED_LOCALES = ('en', 'ar', 'ur')
FALLBACK_LOCALE = 'en'

# Route prefix each locale's dashboard is mounted under
LOCALE_PATH_PREFIX = {
    'en': '/en',
    'ar': '',
    'ur': '/ur',
}

STAFF_ROLES = ['admin', 'editor', 'reporter', 'comments_moderator', 'media_manager']

DASHBOARD_MENU = [
    {
        'id': 'dashboard',
        'path': '/dashboard',
        'exact': True,
        'icon': 'LayoutDashboard',
        'roles': STAFF_ROLES,
    },
    {
        'id': 'content',
        'icon': 'Newspaper',
        'divider': True,
        'roles': ['admin', 'editor', 'reporter'],
        'children': [
            {
                'id': 'articles',
                'path': '/dashboard/articles',
                'exact': True,
                'icon': 'FileText',
                'permissions': ['articles.view'],
            },
            {
                'id': 'articles-new',
                'path': '/dashboard/articles/new',
                'icon': 'FilePlus',
                'permissions': ['articles.create'],
            },
            {
                'id': 'categories',
                'path': '/dashboard/categories',
                'icon': 'FolderTree',
                'permissions': ['categories.view'],
            },
            {
                'id': 'tags',
                'path': '/dashboard/tags',
                'icon': 'Tags',
                'permissions': ['tags.view'],
            },
            {
                'id': 'shorts',
                'path': '/dashboard/shorts',
                'icon': 'Clapperboard',
                'roles': ['admin', 'editor'],
            },
            {
                'id': 'calendar',
                'path': '/dashboard/calendar',
                'icon': 'CalendarDays',
                'roles': ['admin', 'editor', 'reporter'],
            },
        ],
    },
    {
        'id': 'media',
        'icon': 'Images',
        'roles': ['admin', 'editor', 'reporter', 'media_manager'],
        'children': [
            {
                'id': 'media-library',
                'path': '/dashboard/media',
                'icon': 'Image',
                'permissions': ['media.view'],
            },
        ],
    },
    {
        'id': 'ai-tools',
        'icon': 'Sparkles',
        'divider': True,
        'roles': ['admin', 'editor'],
        'children': [
            {
                'id': 'ai-images',
                'path': '/dashboard/ai/images',
                'icon': 'Wand2',
                'roles': ['admin', 'editor'],
            },
            {
                'id': 'infographics',
                'path': '/dashboard/ai/infographics',
                'icon': 'BarChart3',
                'roles': ['admin', 'editor'],
            },
            {
                'id': 'smart-links',
                'path': '/dashboard/ai/smart-links',
                'icon': 'Link2',
                'roles': ['admin', 'editor'],
            },
            {
                'id': 'deep-analysis',
                'path': '/dashboard/ai/deep-analysis',
                'icon': 'Brain',
                'roles': ['admin', 'editor'],
                'feature_flags': ['aiDeepAnalysis'],
            },
            {
                'id': 'audio-summaries',
                'path': '/dashboard/ai/audio',
                'icon': 'Headphones',
                'roles': ['admin', 'editor'],
                'feature_flags': ['audioSummaries'],
            },
        ],
    },
    {
        'id': 'analytics',
        'path': '/dashboard/analytics',
        'icon': 'LineChart',
        'permissions': ['analytics.view'],
        'children': [
            {
                'id': 'analytics-categories',
                'path': '/dashboard/analytics/categories',
                'icon': 'PieChart',
                'permissions': ['analytics.view'],
            },
            {
                'id': 'my-stats',
                'path': '/dashboard/analytics/mine',
                'icon': 'TrendingUp',
                'permissions': ['analytics.view_own'],
            },
        ],
    },
    {
        'id': 'comments',
        'path': '/dashboard/comments',
        'icon': 'MessageSquare',
        'permissions': ['comments.view', 'comments.view_own'],
    },
    {
        'id': 'administration',
        'path': '/dashboard/admin',
        'icon': 'ShieldCheck',
        'divider': True,
        'roles': ['admin'],
        'children': [
            {
                'id': 'users',
                'path': '/dashboard/users',
                'icon': 'Users',
                'permissions': ['users.view'],
            },
            {
                'id': 'roles',
                'path': '/dashboard/roles',
                'icon': 'KeyRound',
                'permissions': ['users.change_role'],
            },
            {
                'id': 'publishers',
                'path': '/dashboard/publishers',
                'icon': 'Building2',
                'roles': ['admin'],
            },
            {
                'id': 'tasks',
                'path': '/dashboard/tasks',
                'icon': 'ListTodo',
                'roles': ['admin', 'editor', 'reporter'],
            },
            {
                'id': 'announcements',
                'path': '/dashboard/announcements',
                'icon': 'Megaphone',
                'roles': STAFF_ROLES,
            },
        ],
    },
    {
        'id': 'settings',
        'path': '/dashboard/settings',
        'exact': True,
        'icon': 'Settings',
        'permissions': ['settings.view'],
        'children': [
            {
                'id': 'themes',
                'path': '/dashboard/settings/themes',
                'icon': 'Palette',
                'roles': ['admin'],
                'feature_flags': ['smartThemes'],
            },
            {
                'id': 'audit-log',
                'path': '/dashboard/settings/audit',
                'icon': 'ScrollText',
                'permissions': ['system.view_audit'],
            },
        ],
    },
]

MENUS = {
    'dashboard': DASHBOARD_MENU,
}

LABELS: Dict[str, Dict[str, str]] = {
    'en': {
        'dashboard': 'Dashboard',
        'content': 'Content',
        'articles': 'Articles',
        'articles-new': 'New Article',
        'categories': 'Categories',
        'tags': 'Tags',
        'shorts': 'Shorts',
        'calendar': 'Calendar',
        'media': 'Media',
        'media-library': 'Media Library',
        'ai-tools': 'AI Tools',
        'ai-images': 'Image Generation',
        'infographics': 'Infographics',
        'smart-links': 'Smart Links',
        'deep-analysis': 'Deep Analysis',
        'audio-summaries': 'Audio Summaries',
        'analytics': 'Analytics',
        'analytics-categories': 'Category Analytics',
        'my-stats': 'My Statistics',
        'comments': 'Comments',
        'administration': 'Administration',
        'users': 'Users',
        'roles': 'Roles & Permissions',
        'publishers': 'Publishers',
        'tasks': 'Tasks',
        'announcements': 'Announcements',
        'settings': 'Settings',
        'themes': 'Themes',
        'audit-log': 'Audit Log',
    },
    'ar': {
        'dashboard': 'لوحة التحكم',
        'content': 'المحتوى',
        'articles': 'المقالات',
        'articles-new': 'مقال جديد',
        'categories': 'التصنيفات',
        'tags': 'الوسوم',
        'shorts': 'المقاطع القصيرة',
        'calendar': 'التقويم',
        'media': 'الوسائط',
        'media-library': 'المكتبة الإعلامية',
        'ai-tools': 'أدوات الذكاء الاصطناعي',
        'ai-images': 'توليد الصور',
        'infographics': 'الإنفوجرافيك',
        'smart-links': 'الروابط الذكية',
        'deep-analysis': 'التحليل العميق',
        'audio-summaries': 'الملخصات الصوتية',
        'analytics': 'التحليلات',
        'analytics-categories': 'تحليلات التصنيفات',
        'my-stats': 'إحصائياتي',
        'comments': 'التعليقات',
        'administration': 'الإدارة',
        'users': 'المستخدمون',
        'roles': 'الأدوار والصلاحيات',
        'publishers': 'الناشرون',
        'tasks': 'المهام',
        'announcements': 'الإعلانات الداخلية',
        'settings': 'الإعدادات',
        'themes': 'السمات',
        'audit-log': 'سجل التدقيق',
    },
    'ur': {
        'dashboard': 'ڈیش بورڈ',
        'content': 'مواد',
        'articles': 'مضامین',
        'articles-new': 'نیا مضمون',
        'categories': 'زمرے',
        'tags': 'ٹیگز',
        'shorts': 'مختصر ویڈیوز',
        'calendar': 'کیلنڈر',
        'media': 'میڈیا',
        'media-library': 'میڈیا لائبریری',
        'ai-tools': 'اے آئی ٹولز',
        'ai-images': 'تصویر سازی',
        'infographics': 'انفوگرافکس',
        'smart-links': 'سمارٹ لنکس',
        'deep-analysis': 'گہرا تجزیہ',
        'audio-summaries': 'آڈیو خلاصے',
        'analytics': 'تجزیات',
        'analytics-categories': 'زمرہ جاتی تجزیات',
        'my-stats': 'میرے اعداد و شمار',
        'comments': 'تبصرے',
        'administration': 'انتظامیہ',
        'users': 'صارفین',
        'roles': 'کردار اور اجازتیں',
        'publishers': 'ناشرین',
        'tasks': 'کام',
        'announcements': 'اعلانات',
        'settings': 'ترتیبات',
        'themes': 'تھیمز',
        'audit-log': 'آڈٹ لاگ',
    },
}


def get_label(node_id: str, locale: str) -> str:
    """Label for a node in a locale, falling back to English, then the id."""
    labels = LABELS.get(locale) or {}
    if node_id in labels:
        return labels[node_id]
    return LABELS[FALLBACK_LOCALE].get(node_id, node_id)


def label_getter(locale: str):
    return lambda node_id: get_label(node_id, locale)


def strip_locale_prefix(path: str, locale: str) -> str:
    """
    Map a locale-mounted route onto the shared menu path space.

    /ur/dashboard/articles -> /dashboard/articles for 'ur'.
    """
    prefix = LOCALE_PATH_PREFIX.get(locale, '')
    if prefix and (path == prefix or path.startswith(prefix + '/')):
        return path[len(prefix):] or '/'
    return path


@lru_cache(maxsize=None)
def get_menu(name: str = 'dashboard', max_depth: int = DEFAULT_MAX_DEPTH) -> Tuple[MenuNode, ...]:
    """Build (once) and return the named menu tree."""
    if name not in MENUS:
        raise NavigationError(f"Unknown menu '{name}'")
    return build_menu(MENUS[name], max_depth)
