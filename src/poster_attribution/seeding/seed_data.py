"""Versioned seed data: canonical names with their known variant spellings.

Bump ``SEED_VERSION`` whenever an entry is added or changed. Seeding is
idempotent, so re-running an older version is harmless.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from poster_attribution.models.enums import EntityKind, PlatformType, SellerType

SEED_VERSION = "2024.4"


@dataclass(frozen=True)
class SeedEntry:
    name: str
    aliases: tuple[str, ...] = ()
    attributes: dict[str, Any] = field(default_factory=dict)  # pyright: ignore[reportUnknownVariableType]


# Catalog placeholders that must never become artists
EXCLUDED_ARTIST_NAMES = frozenset({"Not In Managed List Artist", "Restoration Artist"})

ARTISTS: tuple[SeedEntry, ...] = (
    SeedEntry("Chéri Hérouard", ("Cheri Herouard", "Herouard", "C. Herouard", "C. Hérouard")),
    SeedEntry("Leonetto Cappiello", ("Cappiello", "L. Cappiello")),
    SeedEntry("Jules Chéret", ("Jules Cheret", "Cheret", "Chéret")),
    SeedEntry("Jean-Michel Folon", ("Jean Michel Folon", "Folon")),
    SeedEntry("Maurice Dufrène", ("Maurice Dufrene", "Dufrene", "Dufrène")),
    SeedEntry("O.K. Gérard", ("O.K. Gerard", "OK Gerard")),
    SeedEntry(
        "Franciszek Starowieyski",
        ("Starowieyski", "Starowiezski", "Franciszek Starowiezski"),
    ),
    SeedEntry("Wiesław Wałkuski", ("Wieslaw Walkuski", "Walkuski")),
    SeedEntry("Maciej Hibner", ("Maceij Hibner", "Hibner")),
    SeedEntry("Eugene Mihaesco", ("Eugene Mihasco", "Mihaesco")),
    SeedEntry("Georges Favre", ("Georges Farve", "Farve", "d'apres G. Favre")),
    SeedEntry("Fabien Fabiano", ("Fabien Fabiane", "Fabiano")),
    SeedEntry("Henri Avelot", ("Henri Avalot", "Avelot")),
    SeedEntry("André Masson", ("Andre Masson", "Masson")),
    SeedEntry("Pablo Picasso", ("Picasso",)),
    SeedEntry("Carl Roesch", ("Carl Roescj", "Roesch")),
    SeedEntry("Fernand Léger", ("Fernand Leger", "Leger", "Léger")),
    SeedEntry("Joan Miró", ("Joan Miro", "Miro", "Miró")),
    SeedEntry("Salvador Dalí", ("Salvador Dali", "Dali", "Dalí")),
    SeedEntry("Vincent van Gogh", ("Van Gogh",)),
    SeedEntry("Jean Carlu", ("Carlu",)),
    SeedEntry("Nathan-Garamond", ("Jacques Nathan-Garamond", "Nathan Garamond")),
    SeedEntry("SEM", ("Georges Goursat", "SEM (Georges Goursat)")),
    SeedEntry("Jean-Jacques Sempé", ("Sempe", "Sempé", "Jean-Jacques Sempe")),
    SeedEntry("William Steig", ("W. Steig", "Steig")),
    SeedEntry("Alphonse Mucha", ("Mucha", "A. Mucha")),
    SeedEntry(
        "Henri de Toulouse-Lautrec",
        ("Toulouse-Lautrec", "Lautrec", "d'apres Toulouse-Lautrec"),
    ),
    SeedEntry("A.M. Cassandre", ("Cassandre", "Adolphe Mouron")),
    # Shopify catalog names, variants folded into one entry each
    SeedEntry("A. Berezitsky"),
    SeedEntry("A. Blochlinger"),
    SeedEntry("A. De Loof"),
    SeedEntry("A. Franquet"),
    SeedEntry("A. Freppel"),
    SeedEntry("A. Péris", ("A. Peris",)),
    SeedEntry("A. Petruccelli"),
    SeedEntry("A. Vallee"),
    SeedEntry("A. Van Clasteren"),
    SeedEntry("Adolf Kronengold"),
    SeedEntry("Adriaan Willem Driessen"),
    SeedEntry("Agostinelli"),
    SeedEntry("Al Hirschfeld"),
    SeedEntry("Albert Brenet"),
    SeedEntry("Albert Guillaume"),
    SeedEntry("Albert W. Barbelle"),
    SeedEntry("Alberto Vargas"),
    SeedEntry("Alekos Fassianos"),
    SeedEntry("Alexander Calder"),
    SeedEntry("Alfred Choubrac"),
    SeedEntry("Allen Saalburg"),
    SeedEntry("Almir Mavignier"),
    SeedEntry("Alton Kelley"),
    SeedEntry("André Galland", ("Andre Galland", "A. Galland")),
    SeedEntry("André Lhote", ("Andre Lhote",)),
    SeedEntry("Andry-Farcy"),
    SeedEntry("Andrzej Krajewski"),
    SeedEntry("Andrzej Pągowski", ("Andrzej Pagowski",)),
    SeedEntry("Andy Warhol"),
    SeedEntry("Antoni Tàpies", ("Antoni Tapies",)),
    SeedEntry("Antonio Clavé", ("Antonio Clave",)),
    SeedEntry("Austin Briggs"),
    SeedEntry("Bernard Gillam"),
    SeedEntry("Bernard Villemot"),
    SeedEntry("Betto Lotti"),
    SeedEntry("Bonnie MacLean"),
    SeedEntry("Burton Morris"),
    SeedEntry("C. Brunswic", ("Brunswic",)),
    SeedEntry("Camille Hilaire"),
    SeedEntry("Carlo Dradi"),
    SeedEntry("CEM", ("C.E.M.",)),
    SeedEntry("Charles Addams"),
    SeedEntry("Charles Burki"),
    SeedEntry("Charles Léandre", ("Charles Leandre",)),
    SeedEntry("Charles Loupot"),
    SeedEntry("Charles M. Schulz"),
    SeedEntry("Charles Verneau"),
    SeedEntry("Claes Oldenburg"),
    SeedEntry("Claude Kuhn-Klein"),
    SeedEntry("Claude Venard"),
    SeedEntry("Constant Duval"),
    SeedEntry("Constantin Alajalov"),
    SeedEntry("Constantin Belinsky", ("C. Belinsky",)),
    SeedEntry("Constantin Terechkovitch"),
    SeedEntry("David Byrd"),
    SeedEntry("David Hockney"),
    SeedEntry("David Klein"),
    SeedEntry("David Lance Goines"),
    SeedEntry("Dexter Brown"),
    SeedEntry("Don Weller"),
    SeedEntry("Edward Penfield"),
    SeedEntry("Emil Rudolph Weiss"),
    SeedEntry("Emile Clouet"),
    SeedEntry("Erik Nitsche"),
    SeedEntry("Ernesto García Cabral", ("Ernesto Garcia Cabral", "Ernesto Cabral")),
    SeedEntry("Ernst Friedrich van Husen", ("Van Husen Koln",)),
    SeedEntry("Eugene Ogé", ("Eugene Oge",)),
    SeedEntry("Fernand Fernel"),
    SeedEntry("Fernando Botero"),
    SeedEntry("Fortunato Depero"),
    SeedEntry("Francis Bernard"),
    SeedEntry("Frederick Opper"),
    SeedEntry("Fritz Winter"),
    SeedEntry("Gene Pressler"),
    SeedEntry("George Giusti"),
    SeedEntry("George Petty"),
    SeedEntry("Georges Dola"),
    SeedEntry("Georges Mathieu"),
    SeedEntry("Giovanni Mingozzi", ("Mingozzi",)),
    SeedEntry("Giuseppe Magagnoli", ("Maga", "Giuseppe Magagnoli (Maga)")),
    SeedEntry("Gluyas Williams"),
    SeedEntry("Gretchen Dow Simpson", ("Gretchen Von Simpson",)),
    SeedEntry("Günther Kieser", ("Gunther Kieser",)),
    SeedEntry("Gus Bofa"),
    SeedEntry("Helen Hokinson"),
    SeedEntry("Henri Monnier"),
    SeedEntry("Henry Gerbault"),
    SeedEntry("Henryk Tomaszewski"),
    SeedEntry("Herbert Leupin"),
    SeedEntry("Herbert Matter"),
    SeedEntry("Hervé Morvan", ("Herve Morvan",)),
    SeedEntry("István Orosz", ("Istvan Orosz",)),
    SeedEntry("Jack Davis"),
    SeedEntry("Jackson Pollock"),
    SeedEntry("Jacques Auriac"),
    SeedEntry("Jacques Villon"),
    SeedEntry("Jakub Erol"),
    SeedEntry("James Montgomery Flagg"),
    SeedEntry("Jan Lenica"),
    SeedEntry("Jan Młodożeniec", ("Jan Mlodozeniec", "Mlodozeniec")),
    SeedEntry("Jan Sawka"),
    SeedEntry("Janusz Starchuski", ("Starchuski",)),
    SeedEntry("Jean d'Ylen"),
    SeedEntry("Jean-André Chièze"),
    SeedEntry("Jerzy Flisak"),
    SeedEntry("Jerzy Skarzynski"),
    SeedEntry("Jon Whitcomb"),
    SeedEntry("Joseph Binder"),
    SeedEntry("Joseph Manorino", ("Manorino",)),
    SeedEntry("Józef Mroszczak", ("Jozef Mroszczak",)),
    SeedEntry("Juan Gris", ("d'apres Juan Gris",)),
    SeedEntry("Juan Landi", ("Landi",)),
    SeedEntry("Julius Gipkens"),
    SeedEntry("Karel Appel"),
    SeedEntry("Keith Haring"),
    SeedEntry("Koloman Moser"),
    SeedEntry("Lawson Wood"),
    SeedEntry("Lee Conklin"),
    SeedEntry("Leonard Beaumont"),
    SeedEntry("LeRoy Neiman"),
    SeedEntry("Lucien Boucher"),
    SeedEntry("Lucien Métivet", ("Lucien Metivet",)),
    SeedEntry("Ludwig Bemelmans"),
    SeedEntry("Ludwig Hohlwein"),
    SeedEntry("Lyonel Feininger"),
    SeedEntry("Maciej Zbikowski"),
    SeedEntry("Marc Chagall"),
    SeedEntry("Marek Mosiński", ("Marek Mosinski", "Mosinski")),
    SeedEntry("Mary Petty"),
    SeedEntry("Max Bill"),
    SeedEntry("Mieczysław Wasilewski", ("Mieczyslaw Wasilewski", "Wasilewski")),
    SeedEntry("Miguel Covarrubias"),
    SeedEntry("Milton Glaser"),
    SeedEntry("Mucha Ihnatowicz"),
    SeedEntry("Niklaus Stoecklin"),
    SeedEntry("Niklaus Troxler", ("Troxler Niklaus",)),
    SeedEntry("Norman Rockwell"),
    SeedEntry("O. Zaikova"),
    SeedEntry("Otl Aicher"),
    SeedEntry("Paul Colin"),
    SeedEntry("Paul Rand"),
    SeedEntry("Peter Arno"),
    SeedEntry("Philippe Halsman"),
    SeedEntry("Pierre Fix-Masseau"),
    SeedEntry("Rafal Olbinski"),
    SeedEntry("Ralph Schraivogel"),
    SeedEntry("Randy Tuten"),
    SeedEntry("Raymond Gid"),
    SeedEntry("Raymond Savignac"),
    SeedEntry("Rea Irvin"),
    SeedEntry("Renato Casaro"),
    SeedEntry("René Gruau", ("Rene Gruau",)),
    SeedEntry("René Ravo", ("Rene Ravo",)),
    SeedEntry("René Vincent", ("Rene Vincent",)),
    SeedEntry("Richard Amsel"),
    SeedEntry("Rick Griffin"),
    SeedEntry("Robert Bonfils"),
    SeedEntry("Robert Indiana"),
    SeedEntry("Robert McGinnis"),
    SeedEntry("Roger Duvoisin"),
    SeedEntry("Roland Topor"),
    SeedEntry("Roman Cieslewicz"),
    SeedEntry("Romuald Socha", ("Socha Romuald", "Romvald Socha")),
    SeedEntry("Rosmarie Tissi"),
    SeedEntry("Roxie Munro", ("Roxie",)),
    SeedEntry("Roy Lichtenstein"),
    SeedEntry(
        "Ryszard Kuba Grzybowski",
        ("Richard Kuba Grzybowski", "Ryszard Kuba Grzbowski"),
    ),
    SeedEntry("Sascha Maurer"),
    SeedEntry("Saul Steinberg", ("Steinberg",)),
    SeedEntry("Sepo", ("Severo Pozzati", "Sepo (Severo Pozzati)")),
    SeedEntry("Serge Poliakoff"),
    SeedEntry("Sherman Foote Denton", ("Sherman Foote Dentone",)),
    SeedEntry("Simon Greco", ("S. Greco",)),
    SeedEntry("Stanisław Zamecznik", ("Stanislaw Zamecznik",)),
    SeedEntry("Stanley Mouse"),
    SeedEntry("Stasys Eidrigevicius", ("Eidrigevicius Stasys",)),
    SeedEntry("The Beggarstaff Brothers", ("Beggarstaff Brothers",)),
    SeedEntry("Thomas Theodor Heine", ("Thomas Heine",)),
    SeedEntry("Valerio Adami"),
    SeedEntry("Victor Moscoso"),
    SeedEntry("Vittorio Fiorucci"),
    SeedEntry("Waldemar Świerzy", ("Waldemar Swierzy",)),
    SeedEntry("Wassily Kandinsky"),
    SeedEntry("Werner Jeker"),
    SeedEntry("Werner Klemke"),
    SeedEntry("Wes Wilson"),
    SeedEntry("Wiktor Górka", ("Wiktor Gorka",)),
    SeedEntry("William Hogarth", ("Wm Hogarth",)),
    SeedEntry("William Mackenzie", ("Willism Mackenzie",)),
    SeedEntry("Witold Gordon"),
    SeedEntry("Witold Janowski"),
    SeedEntry("Yves Brayer"),
    SeedEntry("Z. Horodcki"),
)

PRINTERS: tuple[SeedEntry, ...] = (
    SeedEntry("Imprimerie Chaix", ("Chaix", "Imp. Chaix")),
    SeedEntry("DAN", ("Danesi", "DAN Roma", "Stabilimento Danesi")),
    SeedEntry("Imprimerie Vercasson", ("Vercasson",)),
    SeedEntry("Mourlot", ("Imprimerie Mourlot", "Mourlot Frères")),
    SeedEntry("Bouquet & Lusson", ("Bouquet et Lusson",)),
)

PUBLISHERS: tuple[SeedEntry, ...] = (
    SeedEntry("The New Yorker", ("New Yorker", "The New-Yorker")),
    SeedEntry("Fortune", ("Fortune Magazine",)),
    SeedEntry("Vogue", ("Vogue Magazine",)),
    SeedEntry("Le Rire", ()),
    SeedEntry("La Vie Parisienne", ("Vie Parisienne",)),
)

SELLERS: tuple[SeedEntry, ...] = (
    SeedEntry(
        "Christie's",
        ("Christies",),
        {"seller_type": SellerType.AUCTION_HOUSE, "website": "https://www.christies.com"},
    ),
    SeedEntry(
        "Bonhams",
        (),
        {"seller_type": SellerType.AUCTION_HOUSE, "website": "https://www.bonhams.com"},
    ),
    SeedEntry(
        "Swann Auction Galleries",
        ("Swann Galleries", "Swann"),
        {"seller_type": SellerType.AUCTION_HOUSE, "website": "https://www.swanngalleries.com"},
    ),
)

PLATFORMS: tuple[SeedEntry, ...] = (
    SeedEntry("Direct", (), {"platform_type": PlatformType.DIRECT}),
    SeedEntry(
        "eBay",
        ("Ebay", "ebay.com"),
        {"platform_type": PlatformType.MARKETPLACE, "url": "https://www.ebay.com"},
    ),
    SeedEntry(
        "Live Auctioneers",
        ("LiveAuctioneers",),
        {"platform_type": PlatformType.MARKETPLACE, "url": "https://www.liveauctioneers.com"},
    ),
    SeedEntry(
        "Invaluable",
        (),
        {"platform_type": PlatformType.AGGREGATOR, "url": "https://www.invaluable.com"},
    ),
    SeedEntry(
        "Worthpoint",
        ("WorthPoint",),
        {"platform_type": PlatformType.AGGREGATOR, "url": "https://www.worthpoint.com"},
    ),
    SeedEntry("Rose Bowl Flea Market", ("Rose Bowl",), {"platform_type": PlatformType.VENUE}),
    SeedEntry("Arcadia Paper Show", (), {"platform_type": PlatformType.VENUE}),
    SeedEntry("Estate Sale", (), {"platform_type": PlatformType.VENUE}),
)

SEED_DATA: dict[EntityKind, tuple[SeedEntry, ...]] = {
    EntityKind.ARTIST: ARTISTS,
    EntityKind.PRINTER: PRINTERS,
    EntityKind.PUBLISHER: PUBLISHERS,
    EntityKind.SELLER: SELLERS,
    EntityKind.PLATFORM: PLATFORMS,
}
