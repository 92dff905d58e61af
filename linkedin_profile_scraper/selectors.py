# In-page scripts evaluated by the extractors. They only snapshot visible
# text; all parsing happens in Python where it can be tested.

AUTO_SCROLL_SCRIPT = """
async ({ distance, delay, maxSteps }) => {
  await new Promise((resolve) => {
    let steps = 0;
    const timer = setInterval(() => {
      window.scrollBy(0, distance);
      steps += 1;
      const bottom = window.innerHeight + window.scrollY >= document.body.scrollHeight;
      if (bottom || steps >= maxSteps) {
        clearInterval(timer);
        resolve();
      }
    }, delay);
  });
}
"""

PROFILE_SCRIPT = """
() => {
  const text = (el) => (el && el.textContent) || null;
  const card = document.querySelector(
    "section.pv-top-card, .pv-top-card, main section.artdeco-card"
  );
  const root = card || document;
  const photo = root.querySelector(
    "img.pv-top-card-profile-picture__image--show, img.pv-top-card-profile-picture__image, " +
    ".pv-top-card__photo, .profile-photo-edit__preview"
  );
  const about = document.querySelector(
    "section:has(#about) .inline-show-more-text span[aria-hidden='true'], " +
    ".pv-about__summary-text .lt-line-clamp__raw-line"
  );
  return {
    full_name: text(root.querySelector("h1")),
    title: text(root.querySelector(
      ".text-body-medium.break-words, .pv-text-details__left-panel .text-body-medium"
    )),
    location: text(root.querySelector(
      "span.text-body-small.inline.t-black--light.break-words, " +
      ".pv-text-details__left-panel .text-body-small"
    )),
    photo: photo ? photo.getAttribute("src") : null,
    description: text(about),
    url: window.location.href,
  };
}
"""

# Returns one {texts: [...]} entry per list item, holding the item's
# aria-hidden spans in document order with repeats collapsed.
ENTITY_LIST_SCRIPT = """
(selector) => Array.from(document.querySelectorAll(selector)).map((node) => {
  const texts = [];
  node.querySelectorAll("span[aria-hidden='true']").forEach((span) => {
    const value = (span.textContent || "").trim();
    if (value && texts[texts.length - 1] !== value) {
      texts.push(value);
    }
  });
  return { texts };
})
"""

DETAIL_ITEM_SELECTOR = "main section ul > li.pvs-list__paged-list-item"
VOLUNTEERING_ITEM_SELECTOR = (
    "section:has(#volunteering_experience) ul > li.artdeco-list__item, "
    ".pv-profile-section.volunteering-section ul > li"
)
