#!/usr/bin/env python3
"""
Knowledge graph CLI - thin wrapper over NodeRepository.

Usage:
    python main.py create --type Note --title "Graph DBs" --content "..." --tag db --tag neo4j
    python main.py get <node_id>
    python main.py update <node_id> --type Concept --title "..." --content "..." --tag db
    python main.py link <source_id> <target_id> [<target_id> ...] --type RELATED_TO
    python main.py delete-node <node_id>
    python main.py delete-link <relationship_id>

    # Output as JSON
    python main.py --json get <node_id>
"""
import argparse
import json
import logging
import sys
from dataclasses import asdict

from dotenv import load_dotenv
from neo4j.exceptions import DriverError, Neo4jError

load_dotenv()

from core.config import settings
from core.neo4j_driver import init_driver, close_driver
from domain.enums import NodeType, RelationshipType
from domain.errors import NodeNotFoundError, RepositoryError
from domain.models import Node, Relationship
from repositories.node_repo import NodeRepository


def print_node(node: Node, as_json: bool = False):
    if as_json:
        print(json.dumps(asdict(node), default=str, ensure_ascii=False, indent=2))
        return
    print("=" * 80)
    print(f"ID:      {node.id}")
    print(f"Type:    {node.type.value}")
    print(f"Title:   {node.title}")
    print(f"Tags:    {', '.join(sorted(node.tags)) or '-'}")
    print(f"Created: {node.created_at.isoformat()}")
    print(f"Updated: {node.updated_at.isoformat()}")
    print("-" * 80)
    print(node.content)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Knowledge graph node/relationship CLI")
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    sub = parser.add_subparsers(dest="command", required=True)

    node_types = [t.value for t in NodeType]

    create = sub.add_parser("create", help="Create a node")
    create.add_argument("--type", required=True, choices=node_types)
    create.add_argument("--title", required=True)
    create.add_argument("--content", default="")
    create.add_argument("--tag", action="append", default=[], dest="tags")

    get = sub.add_parser("get", help="Show a node")
    get.add_argument("node_id")

    update = sub.add_parser("update", help="Replace a node's fields and tags")
    update.add_argument("node_id")
    update.add_argument("--type", required=True, choices=node_types)
    update.add_argument("--title", required=True)
    update.add_argument("--content", default="")
    update.add_argument("--tag", action="append", default=[], dest="tags")

    link = sub.add_parser("link", help="Create relationships from one node to many")
    link.add_argument("source_id")
    link.add_argument("target_ids", nargs="+")
    link.add_argument("--type", required=True, choices=[t.value for t in RelationshipType])
    link.add_argument("--description", default="")

    delete_node = sub.add_parser("delete-node", help="Detach-delete a node")
    delete_node.add_argument("node_id")

    delete_link = sub.add_parser("delete-link", help="Delete a relationship by id")
    delete_link.add_argument("relationship_id")

    return parser


def run(args: argparse.Namespace, repo: NodeRepository) -> None:
    if args.command == "create":
        node_id = repo.create_node(
            Node(title=args.title, content=args.content, type=NodeType(args.type), tags=args.tags)
        )
        print(json.dumps({"id": node_id}) if args.json else f"✓ Created node {node_id}")

    elif args.command == "get":
        print_node(repo.get_node_by_id(args.node_id), as_json=args.json)

    elif args.command == "update":
        repo.update_node(
            Node(
                id=args.node_id,
                title=args.title,
                content=args.content,
                type=NodeType(args.type),
                tags=args.tags,
            )
        )
        print(json.dumps({"id": args.node_id}) if args.json else f"✓ Updated node {args.node_id}")

    elif args.command == "link":
        ids = repo.create_relationship(
            Relationship(
                source_id=args.source_id,
                target_ids=args.target_ids,
                type=RelationshipType(args.type),
                description=args.description,
            )
        )
        if args.json:
            print(json.dumps({"ids": ids}))
        else:
            print(f"✓ Created {len(ids)} of {len(args.target_ids)} relationship(s)")
            for rel_id in ids:
                print(f"  {rel_id}")

    elif args.command == "delete-node":
        repo.delete_node(args.node_id)
        print(f"✓ Deleted node {args.node_id}")

    elif args.command == "delete-link":
        repo.delete_relationship(args.relationship_id)
        print(f"✓ Deleted relationship {args.relationship_id}")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        init_driver()
        run(args, NodeRepository())
    except NodeNotFoundError as e:
        print(f"⚠ {e}", file=sys.stderr)
        return 2
    except (RepositoryError, Neo4jError, DriverError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        close_driver()
    return 0


if __name__ == "__main__":
    sys.exit(main())
