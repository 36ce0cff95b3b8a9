"""
Client helper for testing the featurekit API
Usage: python api_client.py <command> [options]
"""

import requests
import argparse
from pathlib import Path
import json

API_BASE_URL = 'http://localhost:5000/api'


def extract_phog(image_path, rect=None, levels=None, bins=None, normalise=False, resize=None):
    """
    Call the PHOG API for one image.

    Args:
        image_path: Path to the image
        rect: (x, y, w, h) region or None for the whole image
        levels: Pyramid levels (server default if None)
        bins: Orientation bins (server default if None)
        normalise: L2-normalise the descriptor
        resize: Max image dimension (server default if None)

    Returns:
        Response JSON, or None on failure
    """
    data = {'normalise': 'true' if normalise else 'false'}
    if rect is not None:
        data['rect'] = ','.join(str(v) for v in rect)
    if levels is not None:
        data['levels'] = str(levels)
    if bins is not None:
        data['bins'] = str(bins)
    if resize is not None:
        data['resize'] = str(resize)

    try:
        with open(image_path, 'rb') as f:
            response = requests.post(
                f'{API_BASE_URL}/phog',
                files={'image': (Path(image_path).name, f)},
                data=data,
                timeout=120
            )

        if response.status_code == 200:
            result = response.json()
            print(f"✓ PHOG descriptor with {result['length']} values "
                  f"({result['levels']} levels, {result['bins']} bins)")
            return result

        error = response.json()
        print(f"✗ Error: {error.get('error')}")
        print(f"Message: {error.get('message')}")

    except requests.exceptions.ConnectionError:
        print(f"\n✗ Error: Could not connect to API at {API_BASE_URL}")
        print("Make sure the backend server is running: python app.py")
    except requests.exceptions.Timeout:
        print("\n✗ Error: Request timeout")

    return None


def extract_keypoints(image_path, output_path, fmt='binary', max_keypoints=0):
    """
    Detect keypoints on the server and save the returned keypoint file.

    Args:
        image_path: Path to the image
        output_path: Where to save the keypoint file
        fmt: 'binary' or 'ascii'
        max_keypoints: Keep the N strongest keypoints (0 keeps all)
    """
    try:
        with open(image_path, 'rb') as f:
            response = requests.post(
                f'{API_BASE_URL}/keypoints',
                files={'image': (Path(image_path).name, f)},
                data={'format': fmt, 'max_keypoints': str(max_keypoints)},
                timeout=120
            )

        if response.status_code == 200:
            Path(output_path).write_bytes(response.content)
            print(f"✓ Saved to {output_path}")
        else:
            print(f"✗ Error: {response.json()}")

    except requests.exceptions.ConnectionError:
        print(f"\n✗ Error: Could not connect to API at {API_BASE_URL}")


def get_api_info():
    """Get API information."""
    try:
        response = requests.get(f'{API_BASE_URL}/info')
        if response.status_code == 200:
            print(json.dumps(response.json(), indent=2))
        else:
            print(f"Error: {response.json()}")
    except requests.exceptions.RequestException as e:
        print(f"Error: {str(e)}")


def health_check():
    """Check API health."""
    try:
        response = requests.get(f'{API_BASE_URL}/health')
        if response.status_code == 200:
            info = response.json()
            print(f"✓ API is healthy")
            print(f"  Service: {info['service']}")
            print(f"  Status: {info['status']}")
        else:
            print(f"✗ API health check failed")
    except requests.exceptions.RequestException as e:
        print(f"✗ Cannot connect to API: {str(e)}")


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='featurekit API Client')
    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    phog_parser = subparsers.add_parser('phog', help='Extract a PHOG descriptor')
    phog_parser.add_argument('image', help='Image file')
    phog_parser.add_argument('--rect', type=int, nargs=4, metavar=('X', 'Y', 'W', 'H'), help='Region')
    phog_parser.add_argument('--levels', type=int, help='Pyramid levels')
    phog_parser.add_argument('--bins', type=int, help='Orientation bins')
    phog_parser.add_argument('--normalise', action='store_true', help='L2-normalise')
    phog_parser.add_argument('--output', help='Write the JSON response here')

    kp_parser = subparsers.add_parser('keypoints', help='Detect keypoints')
    kp_parser.add_argument('image', help='Image file')
    kp_parser.add_argument('output', help='Keypoint file to write')
    kp_parser.add_argument('--ascii', action='store_true', help='Request the ASCII format')
    kp_parser.add_argument('--max-keypoints', type=int, default=0, help='Keep the N strongest')

    subparsers.add_parser('info', help='Get API information')
    subparsers.add_parser('health', help='Check API health')

    args = parser.parse_args()

    if args.command == 'phog':
        result = extract_phog(args.image, rect=args.rect, levels=args.levels,
                              bins=args.bins, normalise=args.normalise)
        if result is not None and args.output:
            Path(args.output).write_text(json.dumps(result))
            print(f"✓ Saved to {args.output}")
    elif args.command == 'keypoints':
        extract_keypoints(args.image, args.output, fmt='ascii' if args.ascii else 'binary',
                          max_keypoints=args.max_keypoints)
    elif args.command == 'info':
        get_api_info()
    elif args.command == 'health':
        health_check()
    else:
        parser.print_help()
