"""
Built-in default content used by autofill proposals.

Text templates take the site name through ``{site_name}``.
"""
import re

DESCRIPTION_MAX_LENGTH = 175

DEFAULT_TITLE = '{site_name} | Official website'
DEFAULT_DESCRIPTION = (
    '{site_name} offers simple, reliable digital products with clear pricing, '
    'instant downloads and friendly support for independent professionals and small teams.'
)
DEFAULT_SHORT_DESCRIPTION = (
    '{site_name} publishes straightforward software and digital resources for '
    'independent professionals, small businesses and non-profit organisations.'
)
DEFAULT_LONG_DESCRIPTION = ' '.join([
    '{site_name} builds tools focused on the everyday needs of independent professionals, small businesses and associations.',
    'Each product favours ease of use over feature count so that common tasks take only a few steps.',
    'Customers keep their documents in a private account area and download updates when they need them.',
    'Products are sold as one-time purchases to keep long-term costs predictable.',
])
DEFAULT_TARGET_AUDIENCE = 'Independent professionals, small businesses, associations'
DEFAULT_POSITIONING = 'Simple tools, one-time purchase, focused on everyday compliance'
DEFAULT_DIFFERENTIATION = (
    'No subscription, an uncluttered interface, specialised products '
    'and a private customer area for every account.'
)
DEFAULT_BRAND_TONE = 'PEDAGOGICAL'

DEFAULT_FAQ = [
    {
        'question': 'Which {site_name} product should I choose?',
        'answer': 'Start from the task you need to solve. Each product page lists who the product is for '
                  'and what it covers, so you can pick one tool instead of stacking several.',
    },
    {
        'question': 'Is {site_name} suitable for associations?',
        'answer': 'Yes. Several products are designed for non-profit organisations, with plain wording '
                  'and only the features associations use day to day.',
    },
    {
        'question': 'Can I manage invoices and documents?',
        'answer': 'Products that handle invoicing also keep the related documents organised in your '
                  'private account area so they are easy to find later.',
    },
    {
        'question': 'Is {site_name} an online service?',
        'answer': 'Your purchases and downloads are available from your customer area. Your data stays '
                  'dedicated to your account.',
    },
    {
        'question': 'Is there a subscription?',
        'answer': 'No. Products are sold as a one-time purchase. Available updates for your licence are '
                  'listed in your customer area.',
    },
    {
        'question': 'Is my data private?',
        'answer': 'Each account has a private area. Access is limited to the account holder and the users '
                  'they authorise, and data is never shared with third parties.',
    },
    {
        'question': 'Is {site_name} a good fit for freelancers?',
        'answer': 'Yes. The tools aimed at independent professionals cover invoicing, payment tracking and '
                  'document storage without the complexity of enterprise software.',
    },
    {
        'question': 'How are product updates delivered?',
        'answer': 'New versions are announced in your customer area. You can install the versions compatible '
                  'with your licence whenever you are ready.',
    },
]

DEFAULT_ANSWERS = [
    {
        'question': 'What is {site_name}?',
        'short_answer': '{site_name} publishes simple software and digital resources for independent '
                        'professionals, small businesses and associations.',
        'long_answer': '{site_name} develops focused products for bookkeeping, invoicing and document '
                       'organisation. The approach favours simplicity: a clean interface, few steps and a quick '
                       'setup. Data is stored in a dedicated customer area, and the one-time purchase model keeps '
                       'budgets under control.',
    },
    {
        'question': 'Who are {site_name} products for?',
        'short_answer': 'Freelancers, micro-businesses and associations that want to handle admin work '
                        'without complex software.',
        'long_answer': 'The products gather the essentials each audience needs, such as invoicing, payment '
                       'follow-up and document storage, and leave out rarely used options. Navigation is kept short '
                       'so routine tasks stay quick.',
    },
    {
        'question': 'How does {site_name} handle customer data?',
        'short_answer': 'Every customer gets a private area whose content is never shared with third parties.',
        'long_answer': 'Documents and downloads are attached to the customer account. Access is limited to the '
                       'account holder and authorised users, and each product only stores what it needs to work.',
    },
    {
        'question': 'Why a one-time purchase rather than a subscription?',
        'short_answer': 'A one-time purchase gives a predictable cost and avoids recurring monthly fees.',
        'long_answer': 'Selling products outright suits organisations that prefer to fund a stable tool and keep '
                       'it for several years. It avoids subscription overhead and leaves customers free to install '
                       'the updates compatible with their licence.',
    },
]


def clip_description(value, max_length=DESCRIPTION_MAX_LENGTH):
    """Clip to ``max_length`` characters, cutting back to the previous word boundary."""
    if len(value) <= max_length:
        return value
    return re.sub(r'\s+\S*$', '', value[:max_length]).strip()


def summarize_content(text, fallback=None):
    if not text or not text.strip():
        return fallback
    return clip_description(re.sub(r'\s+', ' ', text).strip())


def build_robots(base_url):
    return f"User-agent: *\nAllow: /\nSitemap: {base_url.rstrip('/')}/sitemap.xml"


def render(template, site_name):
    return template.format(site_name=site_name)


def faq_seed(site_name):
    return [{'question': render(i['question'], site_name), 'answer': render(i['answer'], site_name)}
            for i in DEFAULT_FAQ]


def answer_seed(site_name):
    return [
        {
            'question': render(i['question'], site_name),
            'short_answer': render(i['short_answer'], site_name),
            'long_answer': render(i['long_answer'], site_name),
        }
        for i in DEFAULT_ANSWERS
    ]
